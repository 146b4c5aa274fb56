# services/__init__.py

"""
Services built on top of the core engine and repositories.
"""

from .tracker_service import TrackerService

__all__ = ['TrackerService']
