"""
GetStreetCred services package.

Contains business logic services for the application.
"""

from .seed import SAMPLE_PROJECTS, seed_sample_projects

__all__ = ["SAMPLE_PROJECTS", "seed_sample_projects"]
