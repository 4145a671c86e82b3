"""Application entry point."""
import sys
from quishguard import create_app
from quishguard.config import config
from quishguard.utils.logger import get_logger

logger = get_logger(__name__)

# Create the Flask application instance for Gunicorn
app = create_app()


def main():
    """Run application for local development."""
    try:
        logger.info("=" * 80)
        logger.info(" QUISHGUARD - QR CODE URL THREAT ANALYSIS")
        logger.info("=" * 80)
        logger.info(f"Environment: {config.env}")
        logger.info(f"Host: {config.host}:{config.port}")
        logger.info(f"Debug: {config.debug}")
        logger.info(f"Version: {config.version}")
        logger.info(f"Safe Browsing configured: {bool(config.apis.safe_browsing)}")
        logger.info(f"VirusTotal configured: {bool(config.apis.virustotal)}")
        logger.info(f"WHOIS enabled: {config.apis.whois_enabled}")
        logger.info("=" * 80)

        app.run(
            host=config.host,
            port=config.port,
            debug=config.debug,
            threaded=True
        )
    except Exception as e:
        logger.error(f"Failed to start application: {str(e)}")
        sys.exit(1)


if __name__ == '__main__':
    main()
