"""
LightBnB data-access layer.
Builds parameterized queries for users, properties and reservations and
returns plain records to the web layer.
"""

from lightbnb.services.gateway import QueryGateway
from lightbnb.stores import create_store

__version__ = "1.0.0"

__all__ = ["QueryGateway", "create_store", "__version__"]
