"""
Adapters layer - Storage access (JSON fixtures, booking app REST API).
"""

from .http_repository import HttpSalonRepository
from .json_repository import SAMPLE_DATA_FILE, JsonSalonRepository

__all__ = ["HttpSalonRepository", "JsonSalonRepository", "SAMPLE_DATA_FILE"]
