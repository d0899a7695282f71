# File: taskgrid/db/base_class.py | Version: 1.1 | Path: /taskgrid/db/base_class.py
from sqlalchemy.orm import DeclarativeBase


# Single, authoritative Base for the state service tables
class Base(DeclarativeBase):
    pass
