"""Initial schema.

Creates users, peaks, user_peaks, hikes, hike_points, user_emergency,
badges and user_badges. Badge rows are seeded by the application at
start-up, not here.

Revision ID: 001_initial_schema
Revises: None
Create Date: 2026-10-19
"""

from collections.abc import Sequence

from alembic import op

revision: str = "001_initial_schema"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    # --- Users ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS users (
            id SERIAL PRIMARY KEY,
            username VARCHAR(64) NOT NULL,
            email VARCHAR(320) NOT NULL,
            password_hash VARCHAR(256) NOT NULL,
            allow_location_sharing BOOLEAN NOT NULL DEFAULT false,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            CONSTRAINT users_email_key UNIQUE (email)
        )
    """)

    # --- Peaks ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS peaks (
            id SERIAL PRIMARY KEY,
            name VARCHAR(128) NOT NULL,
            height_m INTEGER NOT NULL,
            mountain_range VARCHAR(128),
            difficulty VARCHAR(16),
            main_trail_color VARCHAR(16),
            lat DOUBLE PRECISION,
            lng DOUBLE PRECISION,
            description TEXT
        )
    """)

    # --- Ascents ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS user_peaks (
            id SERIAL PRIMARY KEY,
            user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            peak_id INTEGER NOT NULL REFERENCES peaks(id),
            marked_at TIMESTAMPTZ NOT NULL,
            lat DOUBLE PRECISION,
            lng DOUBLE PRECISION,
            photo_url VARCHAR(512),
            CONSTRAINT user_peaks_user_id_peak_id_key UNIQUE (user_id, peak_id)
        )
    """)
    op.execute("""
        CREATE INDEX IF NOT EXISTS ix_user_peaks_user_id
        ON user_peaks(user_id)
    """)

    # --- Hikes ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS hikes (
            id SERIAL PRIMARY KEY,
            user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            peak_id INTEGER NOT NULL REFERENCES peaks(id),
            started_at TIMESTAMPTZ NOT NULL,
            duration_sec INTEGER NOT NULL,
            track_distance_km DOUBLE PRECISION NOT NULL,
            straight_distance_km DOUBLE PRECISION,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute("""
        CREATE INDEX IF NOT EXISTS ix_hikes_user_id
        ON hikes(user_id)
    """)
    op.execute("""
        CREATE TABLE IF NOT EXISTS hike_points (
            id BIGSERIAL PRIMARY KEY,
            hike_id INTEGER NOT NULL REFERENCES hikes(id) ON DELETE CASCADE,
            seq INTEGER NOT NULL,
            lat DOUBLE PRECISION NOT NULL,
            lng DOUBLE PRECISION NOT NULL
        )
    """)
    op.execute("""
        CREATE INDEX IF NOT EXISTS ix_hike_points_hike_id
        ON hike_points(hike_id)
    """)

    # --- Emergency card ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS user_emergency (
            user_id INTEGER PRIMARY KEY REFERENCES users(id) ON DELETE CASCADE,
            phone VARCHAR(32),
            emergency_contact_name VARCHAR(128),
            emergency_contact_phone VARCHAR(32),
            blood_type VARCHAR(8),
            address_street VARCHAR(128),
            address_house_number VARCHAR(16),
            address_postal_code VARCHAR(16),
            address_city VARCHAR(128),
            allergies TEXT,
            medications TEXT,
            todays_plan TEXT
        )
    """)

    # --- Badges ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS badges (
            id SERIAL PRIMARY KEY,
            code VARCHAR(64) NOT NULL,
            name VARCHAR(128) NOT NULL,
            description TEXT,
            required_peaks INTEGER,
            CONSTRAINT badges_code_key UNIQUE (code)
        )
    """)
    op.execute("""
        CREATE TABLE IF NOT EXISTS user_badges (
            id SERIAL PRIMARY KEY,
            user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            badge_id INTEGER NOT NULL REFERENCES badges(id),
            earned_at TIMESTAMPTZ NOT NULL,
            CONSTRAINT user_badges_user_id_badge_id_key UNIQUE (user_id, badge_id)
        )
    """)
    op.execute("""
        CREATE INDEX IF NOT EXISTS ix_user_badges_user_id
        ON user_badges(user_id)
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS user_badges CASCADE")
    op.execute("DROP TABLE IF EXISTS badges CASCADE")
    op.execute("DROP TABLE IF EXISTS user_emergency CASCADE")
    op.execute("DROP TABLE IF EXISTS hike_points CASCADE")
    op.execute("DROP TABLE IF EXISTS hikes CASCADE")
    op.execute("DROP TABLE IF EXISTS user_peaks CASCADE")
    op.execute("DROP TABLE IF EXISTS peaks CASCADE")
    op.execute("DROP TABLE IF EXISTS users CASCADE")
