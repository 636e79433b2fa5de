"""Command line interface for running the API server."""
import logging
import uvicorn

from config import settings_conf

logger = logging.getLogger(__name__)

def main():
    """Run the API server with the configured listener."""
    logger.info(f"Starting API on {settings_conf['api_host']}:{settings_conf['api_port']}")
    uvicorn.run(
        "api:app",
        host=settings_conf['api_host'],
        port=settings_conf['api_port'],
        log_level=settings_conf['log_level'].lower()
    )

if __name__ == "__main__":
    main()
