"""
Database models package
"""

from .guest import AttendanceStatus, DietaryPreference, GroupSide, Guest
from .save_the_date_view import SaveTheDateView

__all__ = ["Guest", "SaveTheDateView", "AttendanceStatus", "DietaryPreference", "GroupSide"]
