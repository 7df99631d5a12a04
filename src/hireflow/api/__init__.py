"""API package for Hireflow."""

from .main import app, create_app, create_workflow

__all__ = ["app", "create_app", "create_workflow"]
