"""
Top-level API router.

All routes live under ``/api`` (the prefix is applied in
``main.create_app``).  Certificate records are exposed under
``/students``; account routes (``/register``, ``/login``) and the
token-guarded ``/protected`` route have no further prefix.
"""

from fastapi import APIRouter

from .endpoints import protected, students, users

router = APIRouter()

router.include_router(students.router, prefix="/students", tags=["students"])
router.include_router(users.router, tags=["users"])
router.include_router(protected.router, tags=["protected"])
