"""
Pydantic models for certificate records.

A record describes one issued certificate.  All descriptive fields
are free text.  ``certificate_id`` is generated by the server and is
the public lookup key; the store's internal primary key is never
exposed.  JSON uses the camelCase field names clients already rely on
(``studentName``, ``certificateId``, ...).
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class StudentBase(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    student_name: str = Field("", examples=["Jane Doe"])
    course_name: str = Field("", examples=["Full Stack Development"])
    certificate_number: str = Field("", examples=["FSD-2024-0012"])
    passing_year: str = Field("", examples=["2024"])
    course_duration: str = Field("", examples=["6 months"])
    skills: str = Field("", examples=["Python, SQL, FastAPI"])


class StudentCreate(StudentBase):
    """Fields submitted when issuing a certificate."""


class StudentRead(StudentBase):
    """A stored certificate record as returned by the API."""

    certificate_id: str
    qr_code: str = Field(..., description="PNG data URI encoding the verification URL")
    image_url: str = Field("", description="Reference to the uploaded image, empty if none")
    created_at: Optional[str] = None
