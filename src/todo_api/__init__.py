"""
File-backed Todo REST service.

Exposes the FastAPI app instance for convenience imports (todo_api.app).
"""

from .main import app  # noqa: F401

__version__ = "1.0.0"
