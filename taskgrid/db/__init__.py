# File: taskgrid/db/__init__.py | Version: 1.1 | Path: /taskgrid/db/__init__.py
# Re-export commonly used items so tests can do: from taskgrid.db import Base, get_db
# Import models so SQLAlchemy Base knows about them when metadata is created
import taskgrid.models  # noqa: F401

from .base_class import Base
from .session import SessionLocal, engine, get_db

__all__ = ["Base", "get_db", "SessionLocal", "engine"]
