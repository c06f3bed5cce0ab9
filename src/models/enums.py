"""Enums for model fields."""

from enum import Enum


class UserRole(str, Enum):
    """Account roles."""

    CLIENT = "CLIENT"
    ADMIN = "ADMIN"
