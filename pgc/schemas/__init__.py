"""Pydantic models for database records."""

from .user import UserRecord

__all__ = ["UserRecord"]
