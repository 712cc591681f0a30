import os
from dotenv import load_dotenv

load_dotenv(override=True)


class Config:
    """
    Base configuration for FU News.
    Every value can be overridden through environment variables or app.config.
    """
    # Flask settings
    SECRET_KEY = os.getenv('FLASK_SECRET_KEY', 'dev-secret-key-change-in-production')

    # Backend API
    API_BASE_URL = os.getenv('NEXT_PUBLIC_API_BASE_URL') or os.getenv('API_BASE_URL', 'http://localhost:5000')
    API_TIMEOUT = float(os.getenv('API_TIMEOUT', '10'))

    # Pagination
    PAGE_SIZE = int(os.getenv('PAGE_SIZE', '10'))
    CATEGORY_PAGE_SIZE = int(os.getenv('CATEGORY_PAGE_SIZE', '12'))
    LATEST_NEWS_LIMIT = int(os.getenv('LATEST_NEWS_LIMIT', '10'))
    FEATURED_NEWS_LIMIT = int(os.getenv('FEATURED_NEWS_LIMIT', '5'))

    # Logging database
    DB_DIR = os.getenv('DB_DIR', os.path.join(os.getcwd(), 'databases'))
    LOG_DB = os.getenv('LOG_DB', os.path.join(DB_DIR, 'app_logs.db'))

    # Branding
    BRAND_NAME = os.getenv('BRAND_NAME', 'FU News')
    BRAND_TAGLINE = os.getenv('BRAND_TAGLINE', '')

    # OAuth settings
    GOOGLE_CLIENT_ID = os.getenv('GOOGLE_CLIENT_ID')
    GOOGLE_CLIENT_SECRET = os.getenv('GOOGLE_CLIENT_SECRET')

    # Public JSON endpoints
    CORS_ORIGINS = os.getenv('CORS_ORIGINS', '*')

    port = int(os.getenv('PORT', '3000'))


def get_config_value(key, default=None):
    """Get configuration value: Flask app config first, then Config class, then env var"""
    try:
        from flask import current_app
        val = current_app.config.get(key)
        if val is not None:
            return val
    except RuntimeError:
        pass
    val = getattr(Config, key, None)
    if val is not None:
        return val
    return os.getenv(key, default)
