"""Main application entry point."""

from eventsync.config.environment import IS_PRODUCTION_ENVIRONMENT

if __name__ == "__main__":
    import uvicorn

    if not IS_PRODUCTION_ENVIRONMENT:
        # Development mode - hot-reload and verbose logs
        uvicorn.run(
            "eventsync.api.app:create_application",
            factory=True,
            host="0.0.0.0",
            port=8000,
            reload=True,
            log_level="debug"
        )
    else:
        # Production mode - string reference for proper multi-worker support
        uvicorn.run(
            "eventsync.api.app:create_application",
            factory=True,
            host="0.0.0.0",
            port=8000,
            reload=False,
            workers=4,
            log_level="info",
            proxy_headers=True,
            forwarded_allow_ips="*"
        )
