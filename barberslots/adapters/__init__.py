"""
Adapters layer - Barbershop data sources (REST API and JSON exports).
"""

from .api_client import BarbershopApiClient
from .json_repository import JsonBarbershopRepository

__all__ = ["BarbershopApiClient", "JsonBarbershopRepository"]
