#!/usr/bin/env python3
"""
Entry point for the Greyn Eco cart service
"""

import logging
import sys

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI

from greyn_cart.infrastructure.configuration.config import get_config
from greyn_cart.infrastructure.container.dependency_injection import initialize_container
from greyn_cart.infrastructure.database.operations import init_db
from greyn_cart.infrastructure.logging.logging_config import setup_logging
from greyn_cart.presentation.api.app import create_app

# Load environment variables from .env file
load_dotenv()


def setup_app() -> FastAPI:
    """Configure logging, prepare the database and build the API"""
    config = get_config()
    setup_logging(config)
    logger = logging.getLogger(__name__)
    logger.info("Configuration loaded (environment: %s)", config.environment)

    container = initialize_container(config)
    logger.info("Initializing database...")
    init_db(container.db_manager)
    logger.info("Database initialized successfully")

    return create_app(container)


def main() -> int:
    """Main entry point"""
    try:
        app = setup_app()
    except Exception as e:
        logging.getLogger(__name__).critical("Failed to start cart service: %s", e)
        return 1

    config = get_config()
    uvicorn.run(app, host=config.host, port=config.port, log_level=config.log_level.lower())
    return 0


if __name__ == "__main__":
    sys.exit(main())
