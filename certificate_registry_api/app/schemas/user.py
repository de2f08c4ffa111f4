"""
Pydantic models for accounts and sessions.

Passwords only ever travel inbound; no response model carries the
password or its hash.
"""

from pydantic import BaseModel, Field


class UserCreate(BaseModel):
    """Schema for registering an account."""

    name: str = Field(..., examples=["Jane Doe"])
    email: str = Field(..., min_length=1, examples=["jane@example.com"])
    password: str = Field(..., min_length=1, examples=["strongpassword"])


class UserLogin(BaseModel):
    email: str
    password: str


class UserRead(BaseModel):
    """Account data safe to hand to callers."""

    id: int
    name: str
    email: str


class Token(BaseModel):
    token: str


class Message(BaseModel):
    message: str
