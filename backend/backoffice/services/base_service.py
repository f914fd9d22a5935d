"""
Base service class.
Services hold the business rules and own the transaction boundaries of their operations.
"""

from abc import ABC


class BaseService(ABC):
    """Base service class for all services."""
    pass
