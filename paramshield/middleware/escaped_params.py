"""
Flask integration for the parameter sanitizer

Two ways to use it:
1. EscapedParams(app) escapes the parameters of every request
2. @escaped_params(...) escapes them for a single view, with its own options
"""
import logging
from functools import wraps

from flask import current_app, request

from paramshield.escapers import ESCAPERS
from paramshield.exceptions import ConfigurationError
from paramshield.sanitize import ParamSanitizer

logger = logging.getLogger(__name__)

EXTENSION_NAME = 'escaped_params'


class EscapedParams:
    """
    Flask extension that escapes request.args and request.form for every view

    Reads its options from the app config:
    - ESCAPED_PARAMS_MODES: mode name or list of names (html, javascript, url)
    - ESCAPED_PARAMS_ESCAPER: escaper name from paramshield.escapers.ESCAPERS,
      or an escaper object
    - ESCAPED_PARAMS_MARK_SAFE: wrap escaped strings in Markup
    - ESCAPED_PARAMS_LOGGING: log dropped parameters
    """

    def __init__(self, app=None):
        self.app = app
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        app.config.setdefault('ESCAPED_PARAMS_MODES', 'html')
        app.config.setdefault('ESCAPED_PARAMS_ESCAPER', 'html')
        app.config.setdefault('ESCAPED_PARAMS_MARK_SAFE', True)
        app.config.setdefault('ESCAPED_PARAMS_LOGGING', True)

        sanitizer = ParamSanitizer(
            escape=app.config['ESCAPED_PARAMS_MODES'],
            escaper=resolve_escaper(app.config['ESCAPED_PARAMS_ESCAPER']),
            mark_safe=app.config['ESCAPED_PARAMS_MARK_SAFE'],
            logging=app.config['ESCAPED_PARAMS_LOGGING'],
            logger=app.logger,
        )
        app.extensions[EXTENSION_NAME] = sanitizer

        # Only the view runs with escaped parameters; before_request,
        # after_request and error handlers see the originals
        app.dispatch_request = self._wrap_dispatch(app.dispatch_request)

        logger.info(
            "Escaping request parameters with modes: %s",
            ', '.join(sorted(mode.value for mode in sanitizer.modes)) or 'none',
        )

    def _wrap_dispatch(self, dispatch_request):
        @wraps(dispatch_request)
        def dispatch_with_escaped_params():
            view = current_app.view_functions.get(request.endpoint)
            if getattr(view, 'escaped_params', None) is not None:
                # The view brings its own sanitizer
                return dispatch_request()

            return get_sanitizer().wrap(
                request._get_current_object(),
                lambda req: dispatch_request(),
            )

        return dispatch_with_escaped_params


def resolve_escaper(escaper):
    """Turn an escaper name from the config into an escaper object."""
    if escaper is None or not isinstance(escaper, str):
        return escaper
    try:
        return ESCAPERS[escaper.strip().lower()]()
    except KeyError:
        raise ConfigurationError(
            f"Unknown escaper {escaper!r}; expected one of: {', '.join(sorted(ESCAPERS))}"
        ) from None


def get_sanitizer():
    """
    Helper function to get the sanitizer registered on the current app

    Returns:
        ParamSanitizer: The app-wide sanitizer or None
    """
    return current_app.extensions.get(EXTENSION_NAME)


def escaped_params(escape='html', escaper=None, mark_safe=True):
    """
    Decorator to escape request parameters for one view

    The sanitizer is built when the view is decorated, so a bad
    configuration fails at import time rather than on the first request.
    """
    sanitizer = ParamSanitizer(
        escape=escape,
        escaper=resolve_escaper(escaper),
        mark_safe=mark_safe,
    )

    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            return sanitizer.wrap(
                request._get_current_object(),
                lambda req: f(*args, **kwargs),
            )

        decorated_function.escaped_params = sanitizer
        return decorated_function

    return decorator
