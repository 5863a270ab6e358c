"""
Service layer exposing the data operations used by the web layer.
"""

from lightbnb.services.gateway import QueryGateway

__all__ = ["QueryGateway"]
