"""
Schools module - The school directory and image uploads.
"""

from school_directory.modules.schools.models import School
from school_directory.modules.schools.repository import SchoolRepository
from school_directory.modules.schools.router import router

__all__ = ["School", "SchoolRepository", "router"]
