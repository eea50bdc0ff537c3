#!/usr/bin/env python3
"""
Shared SQLAlchemy base and mixin for the Token Auth API.

- UUID primary key (String(36)) with defaults
- created_at / updated_at timestamps
- to_dict() that formats timestamps, removes SA internals and secrets

Notes:
- We use server-side defaults (func.now()) so timestamps are set consistently by the DB.
- For SQLite, func.now() maps to CURRENT_TIMESTAMP.
"""

from __future__ import annotations

from datetime import datetime
import uuid

from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

TIME_FMT = "%Y-%m-%dT%H:%M:%S.%f"

# Fields that must never leave the persistence layer in a dict
SECRET_FIELDS = ("password_hash", "refresh_token")

# Declarative base for all models
Base = declarative_base()


def _uuid_str() -> str:
    """Return a canonical UUIDv4 string (36 chars, with hyphens)."""
    return str(uuid.uuid4())


class BaseModel:
    """
    Base mixin for all persistent models: id, created_at, updated_at and to_dict().
    """

    id = Column(String(36), primary_key=True, default=_uuid_str, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __init__(self, *args, **kwargs):
        """
        Allow attribute initialization via kwargs without requiring a session here.
        Timestamps are left to DB defaults unless passed explicitly.
        """
        for key, value in kwargs.items():
            if key != "__class__":
                setattr(self, key, value)
        if getattr(self, "id", None) is None:
            self.id = _uuid_str()

    def to_dict(self) -> dict:
        """
        Return a dictionary of column values suitable for logging or debugging,
        with timestamps formatted and secret fields removed.
        """
        d = {k: v for k, v in self.__dict__.items() if k != "_sa_instance_state"}
        if isinstance(d.get("created_at"), datetime):
            d["created_at"] = d["created_at"].strftime(TIME_FMT)
        if isinstance(d.get("updated_at"), datetime):
            d["updated_at"] = d["updated_at"].strftime(TIME_FMT)
        for field in SECRET_FIELDS:
            d.pop(field, None)
        d["__class__"] = self.__class__.__name__
        return d
