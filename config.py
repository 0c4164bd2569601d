"""
Centralized configuration for all modules
"""
import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Application name (default for the admin-editable application name setting)
APP_NAME = os.environ.get('APP_NAME', 'TagPool')

# ==================== PATHS ====================

# Uploaded media and thumbnails live side by side
FILES_DIRECTORY = os.environ.get('FILES_DIRECTORY', './files')

# Data storage
DATABASE_PATH = os.environ.get('DATABASE_PATH', './tagpool.db')

# ==================== APP SECURITY ====================

# Secret key for Quart sessions (required for login)
# Set this in your .env file to a long, random string
SECRET_KEY = os.environ.get('SECRET_KEY', 'dev-secret-key-change-for-production')

# ==================== DATABASE PERFORMANCE ====================

# SQLite cache size in MB (default 64MB)
DB_CACHE_SIZE_MB = int(os.environ.get('DB_CACHE_SIZE_MB', 64))

# Memory-mapped I/O size in MB (default 256MB)
DB_MMAP_SIZE_MB = int(os.environ.get('DB_MMAP_SIZE_MB', 256))

# WAL checkpoint interval (number of frames, default 1000)
DB_WAL_AUTOCHECKPOINT = int(os.environ.get('DB_WAL_AUTOCHECKPOINT', 1000))

# ==================== LOGGING ====================

# Logging level: DEBUG, INFO, WARNING, ERROR, CRITICAL
LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO').upper()

# ==================== WEB APP ====================

FLASK_HOST = os.environ.get('FLASK_HOST', '0.0.0.0')
FLASK_PORT = int(os.environ.get('FLASK_PORT', 3000))
FLASK_DEBUG = os.environ.get('FLASK_DEBUG', 'False').lower() == 'true'

# ==================== DEFAULTS ====================

class Defaults:
    """Default values for various operations."""
    POSTS_PER_PAGE = 50
    POOLS_PER_PAGE = 25
    RSS_PAGE_SIZE = 20
    AUTOCOMPLETE_MAX_RESULTS = 10


# ==================== VALIDATION ====================

def validate_config():
    """Validate configuration and warn about issues"""
    from utils.logging_config import get_logger
    logger = get_logger('Config')

    warnings = []

    if SECRET_KEY == 'dev-secret-key-change-for-production':
        warnings.append("SECRET_KEY is set to default value - change this for production!")

    if not os.path.isdir(FILES_DIRECTORY):
        warnings.append(f"Files directory not found: {FILES_DIRECTORY} (it will be created)")

    for warning in warnings:
        logger.warning(warning)

    return len(warnings) == 0
