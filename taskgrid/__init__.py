# File: /taskgrid/__init__.py | Version: 1.0 | Title: taskgrid package
__version__ = "1.0.0"
