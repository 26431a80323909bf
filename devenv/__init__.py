"""
Alpine development environment preflight and bootstrap.

Verifies host prerequisites and drives the container build.
"""

__version__ = "1.0.0"
