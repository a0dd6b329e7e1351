"""Top-level package for Django configuration.

This package holds the SportBook settings modules for the different
environments together with the WSGI and ASGI entry points.
"""
