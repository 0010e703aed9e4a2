"""Routes package"""
from .echo import echo_bp

__all__ = ['echo_bp']
