"""
Base controller class.
Controllers build services for a request and return Pydantic schemas.
"""

from abc import ABC


class BaseController(ABC):
    """Base controller class for all controllers."""
    pass
