"""
Entry point for the life-data reliability backend.
"""
import uvicorn

from lifedata.config import get_settings


def main():
    """Run the FastAPI application."""
    settings = get_settings()
    uvicorn.run(
        "lifedata.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower()
    )


if __name__ == "__main__":
    main()
