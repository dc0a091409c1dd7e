"""
HTTP REST API

FastAPI server for adjusting a running pulse.
"""

from .server import create_app

__all__ = ["create_app"]
