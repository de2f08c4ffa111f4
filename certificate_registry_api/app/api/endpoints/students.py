"""
Certificate record endpoints.

Records are submitted as a multipart form so an image can travel with
the descriptive fields.  Creation is public unless
``PROTECT_STUDENT_CREATION`` is enabled; listing and lookup are always
public because the QR code on a printed certificate links to the
lookup route.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status

from certificate_registry_api.app.core.exceptions import CertificateNotFoundError
from certificate_registry_api.app.core.security import CurrentUser, optional_protection
from certificate_registry_api.app.schemas.student import StudentCreate, StudentRead
from certificate_registry_api.app.services.student_service import StudentService

router = APIRouter()


@router.post("", response_model=StudentRead, status_code=status.HTTP_201_CREATED)
async def create_student(
    student_name: str = Form("", alias="studentName"),
    course_name: str = Form("", alias="courseName"),
    certificate_number: str = Form("", alias="certificateNumber"),
    passing_year: str = Form("", alias="passingYear"),
    course_duration: str = Form("", alias="courseDuration"),
    skills: str = Form(""),
    image: Optional[UploadFile] = File(None),
    current_user: Optional[CurrentUser] = Depends(optional_protection),
) -> StudentRead:
    """Issue a certificate and return the stored record.

    The response contains the generated ``certificateId``, the QR code
    for the verification page and the stored image reference.
    """
    data = StudentCreate(
        student_name=student_name,
        course_name=course_name,
        certificate_number=certificate_number,
        passing_year=passing_year,
        course_duration=course_duration,
        skills=skills,
    )
    image_filename = None
    image_data = None
    # Browsers send an empty file part when no image was chosen.
    if image is not None and image.filename:
        image_filename = image.filename
        image_data = await image.read()
    return await StudentService.create_student(data, image_filename, image_data)


@router.get("", response_model=List[StudentRead])
async def list_students() -> List[StudentRead]:
    """Return every issued certificate."""
    return await StudentService.list_students()


@router.get("/{certificate_id}", response_model=StudentRead)
async def get_student(certificate_id: str) -> StudentRead:
    """Retrieve a certificate by its public identifier.

    Returns HTTP 404 if no certificate has this identifier.
    """
    try:
        return await StudentService.get_student(certificate_id)
    except CertificateNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Student not found")
