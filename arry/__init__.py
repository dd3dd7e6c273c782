"""A small WSGI web framework with a radix-tree router, middlewares and template engines."""

__version__ = "0.1.0"