# rasoi/__init__.py
"""
Package entrypoint for the FastAPI application.

This lets us run:
    uvicorn rasoi:app --reload
"""

from .main import app

__all__ = ["app"]
