"""
Configuration settings for different environments
"""
import os

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name, default):
    return os.environ.get(name, str(default)).lower() in ['true', 'on', '1']


class Config:
    """Base configuration"""
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'

    # Parameter escaping
    ESCAPED_PARAMS_MODES = os.environ.get('ESCAPED_PARAMS_MODES', 'html').split(',')
    ESCAPED_PARAMS_ESCAPER = os.environ.get('ESCAPED_PARAMS_ESCAPER', 'html')
    ESCAPED_PARAMS_MARK_SAFE = _env_bool('ESCAPED_PARAMS_MARK_SAFE', True)
    ESCAPED_PARAMS_LOGGING = _env_bool('ESCAPED_PARAMS_LOGGING', True)

    # Logging
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO').upper()

    # File uploads
    MAX_CONTENT_LENGTH = int(os.environ.get('MAX_CONTENT_LENGTH', 16 * 1024 * 1024))  # 16MB

    # Server
    PORT = int(os.environ.get('PORT', '5000'))


class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True
    TESTING = False
    LOG_LEVEL = 'DEBUG'


class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False
    TESTING = False


# Configuration dictionary
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'default': DevelopmentConfig
}
