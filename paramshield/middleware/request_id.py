"""
Request ID middleware so sanitizer warnings can be traced to a request
"""
import uuid

REQUEST_ID_HEADER = 'X-Request-ID'
REQUEST_ID_ENVIRON_KEY = 'request_id'


class RequestIdMiddleware:
    """
    WSGI middleware that tags each request with a unique ID

    Reuses the caller's X-Request-ID when one is sent, stores the ID in the
    WSGI environ and echoes it back on the response.
    """

    def __init__(self, app):
        self.app = app

    def __call__(self, environ, start_response):
        request_id = environ.get('HTTP_X_REQUEST_ID') or str(uuid.uuid4())
        environ[REQUEST_ID_ENVIRON_KEY] = request_id

        def start_response_with_id(status, headers, exc_info=None):
            headers.append((REQUEST_ID_HEADER, request_id))
            return start_response(status, headers, exc_info)

        return self.app(environ, start_response_with_id)
