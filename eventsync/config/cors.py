"""CORS configuration for the FastAPI application."""

import os

from .environment import IS_PRODUCTION_ENVIRONMENT

# Production origins come from the environment, comma separated
_production_origins = [
    origin.strip()
    for origin in os.environ.get('CORS_ALLOWED_ORIGINS', '').split(',')
    if origin.strip()
]

ALLOWED_ORIGINS = {
    False: ["*"],                 # Development - allow all
    True: _production_origins,    # Production - restricted
}

ALLOWED_METHODS = [
    "GET",      # Listing, exports, change feed
    "POST",     # Event submission and lifecycle commands
    "PUT",      # Admin role changes
    "OPTIONS"   # Required for CORS preflight
]

ALLOWED_HEADERS = [
    "Authorization",  # Bearer session tokens and admin key
    "Content-Type",
    "Accept",
]

CORS_CONFIG = {
    "allow_origins": ALLOWED_ORIGINS[IS_PRODUCTION_ENVIRONMENT],
    "allow_credentials": True,
    "allow_methods": ALLOWED_METHODS,
    "allow_headers": ALLOWED_HEADERS,
    "expose_headers": [],
    "max_age": 3600,
}
