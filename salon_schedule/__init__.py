"""
salon_schedule - master availability, free slots and schedule gaps for salon booking.
"""

__version__ = "0.1.0"
