"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .schedule_tools import SalonRepositoryProtocol, ScheduleToolsService

__all__ = ["SalonRepositoryProtocol", "ScheduleToolsService"]
