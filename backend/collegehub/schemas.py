"""Pydantic request/response schemas used by the API.

Schemas keep API input/output shapes stable and provide validation for
controller handlers and tests.
"""

from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field


class RegisterIn(BaseModel):
    """Payload for user registration/login endpoints."""
    username: str
    password: str


class TokenOut(BaseModel):
    """Authentication response containing an access token."""
    access_token: str


class CollegeIn(BaseModel):
    """Request format for creating a college."""
    name: str = Field(min_length=1, max_length=200)


class CollegeOut(BaseModel):
    id: int
    name: str


class CourseIn(BaseModel):
    """Request format for publishing a course in the caller's college."""
    title: str = Field(min_length=1, max_length=200)
    description: str = ""
    college_id: int


class CourseOut(BaseModel):
    """A course as returned by the JSON listing."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: str
    college_id: int
    created_at: datetime
    created_by: int
