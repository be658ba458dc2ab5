import logging
import sys

import uvicorn
from dotenv import load_dotenv

from com.otprelay.app.api import create_app
from com.otprelay.app.config import load_config
from com.otprelay.app.loggingconfig import setup_logging
from com.otprelay.common.errors import ConfigError

def main():
    logger = logging.getLogger(__name__)
    load_dotenv()
    try:
        cfg = load_config()
        setup_logging(cfg.log_level, cfg.log_file)
        app = create_app(cfg)
    except ConfigError as e:
        # refuse to serve anything without a store
        logging.basicConfig(level=logging.INFO)
        logger.critical("configuration error: %s", e)
        sys.exit(2)

    try:
        uvicorn.run(app, host=cfg.http_host, port=cfg.http_port, log_config=None)
    except KeyboardInterrupt:
        logger.info("Received Ctrl+C, shutting down gracefully...")

if __name__ == "__main__":
    main()
