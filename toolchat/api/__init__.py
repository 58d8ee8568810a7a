"""
FastAPI server module for toolchat.

Provides the chat endpoint the browser UI talks to.
"""

from .main import app, create_app

__all__ = ["app", "create_app"]
