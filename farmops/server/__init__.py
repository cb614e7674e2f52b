"""
farmops Server Package.

This package contains the web server implementation for the farmops API.
"""
