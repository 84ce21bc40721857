"""SQLModel data models.

This module defines the application's database tables using SQLModel.
A `User` optionally belongs to one `College`; a `Course` always belongs
to a college and records the user who created it.
"""

from typing import Optional
from sqlmodel import SQLModel, Field
from datetime import datetime, timezone


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class College(SQLModel, table=True):
    """A college users can join. Only the id is referenced elsewhere."""
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True, nullable=False, unique=True)
    created_at: datetime = Field(default_factory=_utcnow)


class User(SQLModel, table=True):
    """A registered user.

    Fields:
    - `username`: unique login name
    - `password_hash`: hashed password string (never store plaintext)
    - `college_id`: the college the user currently belongs to, if any
    """
    id: Optional[int] = Field(default=None, primary_key=True)
    username: str = Field(index=True, nullable=False, unique=True)
    password_hash: str
    college_id: Optional[int] = Field(default=None, foreign_key='college.id', index=True)
    created_at: datetime = Field(default_factory=_utcnow)


class Course(SQLModel, table=True):
    """A course published inside a college."""
    id: Optional[int] = Field(default=None, primary_key=True)
    title: str
    description: str = ""
    college_id: int = Field(foreign_key='college.id', index=True)
    created_at: datetime = Field(default_factory=_utcnow, index=True)
    created_by: int = Field(foreign_key='user.id')
