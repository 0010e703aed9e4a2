"""
Pytest configuration and fixtures for paramshield tests
"""
import io
import os

import pytest
from flask import Flask, request
from werkzeug.datastructures import MultiDict
from werkzeug.test import EnvironBuilder

from paramshield import EscapedParams, ParamSanitizer, create_app


@pytest.fixture(scope='session')
def app():
    """Create application instance for testing"""
    os.environ['FLASK_ENV'] = 'testing'
    return create_app('testing')


@pytest.fixture(scope='function')
def client(app):
    """Create test client"""
    return app.test_client()


@pytest.fixture
def sanitizer():
    """Sanitizer with the default options (HTML escaping)"""
    return ParamSanitizer()


@pytest.fixture
def make_request():
    """Factory for werkzeug requests with query and body parameters"""
    builders = []

    def _make_request(query=None, data=None, method='POST', **kwargs):
        builder = EnvironBuilder(
            path='/search',
            method=method,
            query_string=query,
            data=data,
            **kwargs
        )
        builders.append(builder)
        return builder.get_request()

    yield _make_request

    for builder in builders:
        builder.close()


@pytest.fixture
def upload():
    """A file upload as sent by a browser"""
    return (io.BytesIO(b'<html>not text</html>'), 'page.html')


@pytest.fixture
def recording_app():
    """
    Bare Flask app whose teardown records the parameters left on the request
    """
    def _create(**config):
        app = Flask(__name__)
        app.config['TESTING'] = True
        app.config.update(config)
        app.seen = MultiDict()

        @app.teardown_request
        def record(exc=None):
            app.seen.add('after', request.args.get('q'))

        EscapedParams(app)
        return app

    return _create
