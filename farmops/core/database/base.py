"""
Base database models and utilities.

This module provides the foundational database components used across
all entities in the centralized database layer using SQLModel.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from pydantic import ConfigDict
from sqlmodel import SQLModel


class Base(SQLModel):
    """Base class for all SQLModel entities."""

    model_config = ConfigDict(arbitrary_types_allowed=True)


def new_id() -> str:
    """Generate a string primary key."""
    return uuid.uuid4().hex


def utc_now() -> datetime:
    """Current UTC time as a naive datetime (the storage convention for all timestamps)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)
