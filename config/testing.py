"""
Testing configuration for paramshield
"""
from config.settings import Config


class TestingConfig(Config):
    """Testing configuration with predictable escaping options"""

    TESTING = True
    DEBUG = False

    # Escape for both HTML and JavaScript contexts in tests
    ESCAPED_PARAMS_MODES = ['html', 'javascript']
    ESCAPED_PARAMS_ESCAPER = 'javascript'
    ESCAPED_PARAMS_MARK_SAFE = True
    ESCAPED_PARAMS_LOGGING = True

    # Logging
    LOG_LEVEL = 'WARNING'
