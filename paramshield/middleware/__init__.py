"""Middleware package"""
from .escaped_params import EscapedParams, escaped_params, get_sanitizer, resolve_escaper
from .request_id import RequestIdMiddleware

__all__ = [
    'EscapedParams',
    'RequestIdMiddleware',
    'escaped_params',
    'get_sanitizer',
    'resolve_escaper',
]
