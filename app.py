import os

import config
from quart import Quart
from dotenv import load_dotenv
from datetime import timedelta

load_dotenv(override=True)

from routers import api_blueprint
from core.runtime_config import RuntimeConfigStore
from database import initialize_database
from utils.logging_config import setup_logging, get_logger


def create_app():
    """Create and configure the Quart application."""
    # Initialize logging first
    log_level = getattr(config, 'LOG_LEVEL', 'INFO')
    setup_logging(level=log_level)
    logger = get_logger('App')
    logger.info(f"Initializing {config.APP_NAME} application...")

    config.validate_config()
    os.makedirs(config.FILES_DIRECTORY, exist_ok=True)

    app = Quart(__name__)

    # Quart config
    app.config['SECRET_KEY'] = config.SECRET_KEY
    app.config['PERMANENT_SESSION_LIFETIME'] = timedelta(days=30)

    # Ensure the database file and tables exist.
    initialize_database()

    # Readers take snapshots of this; the settings endpoint is the only writer
    app.config['RUNTIME_CONFIG_STORE'] = RuntimeConfigStore.load()

    app.register_blueprint(api_blueprint, url_prefix='/api')

    return app


if __name__ == '__main__':
    import uvicorn
    app = create_app()
    uvicorn.run(app, host=config.FLASK_HOST, port=config.FLASK_PORT, log_level="info")
