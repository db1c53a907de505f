"""
API server entrypoint.

Run with:
    python -m food_order.server
"""

import logging

import uvicorn

from food_order.api import create_app
from food_order.config import LOG_FORMAT, load_config


def main() -> None:
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
    logger = logging.getLogger(__name__)

    config = load_config()
    app = create_app(config)
    logger.info("Server running on http://%s:%d", config.server.host, config.server.port)
    uvicorn.run(app, host=config.server.host, port=config.server.port)


if __name__ == "__main__":
    main()
