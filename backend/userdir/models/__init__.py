"""
User Directory Database Models
Exports all models for use throughout the service.
"""

from userdir.models.user import User

__all__ = [
    "User",
]
