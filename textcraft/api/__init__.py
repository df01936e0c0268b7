"""
Textcraft API Module

Provides the FastAPI server for Textcraft.
"""

from textcraft.api.server import app, create_app

__all__ = ['app', 'create_app']
