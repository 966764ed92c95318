"""HTTP middleware stack for the CrownHike API."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from crownhike.config import Settings
from crownhike.middleware.error_handler import setup_error_handlers
from crownhike.middleware.logging import setup_logging
from crownhike.middleware.rate_limit import RateLimitMiddleware
from crownhike.middleware.request_id import RequestIdMiddleware

CORS_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
CORS_HEADERS = ["Authorization", "Content-Type", "X-Request-Id"]
CORS_EXPOSED = ["X-Request-Id", "X-RateLimit-Remaining", "X-RateLimit-Limit"]


def setup_middleware(app: FastAPI, settings: Settings) -> None:
    setup_logging(settings)
    setup_error_handlers(app)
    app.add_middleware(
        RateLimitMiddleware,
        requests_per_window=settings.rate_limit_requests,
        window_seconds=settings.rate_limit_window_seconds,
    )
    app.add_middleware(RequestIdMiddleware)
    # Last added runs first: rate-limit 429s must still carry CORS headers
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=CORS_METHODS,
        allow_headers=CORS_HEADERS,
        expose_headers=CORS_EXPOSED,
    )
