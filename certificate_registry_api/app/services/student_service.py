"""
Business logic for certificate records.

Records are immutable once issued: the service offers creation,
listing and lookup by the public certificate identifier, and nothing
else.  Creation follows a fixed order because the QR payload embeds the
identifier: generate the identifier, build the verification URL,
render the QR code, store the optional image, then persist the record.
If the record cannot be persisted the stored image is removed again.

QR rendering, file writes and SQLite calls block, so they run in the
threadpool.
"""

import logging
import sqlite3
import uuid
from typing import List, Optional

from fastapi.concurrency import run_in_threadpool

from ..core.db import get_connection
from ..core.exceptions import CertificateNotFoundError, StorageError
from ..core.qr import build_verification_url, generate_qr_data_uri
from ..core.storage import remove_upload, save_upload
from ..schemas.student import StudentCreate, StudentRead

logger = logging.getLogger(__name__)


class StudentService:
    """Service for issuing and looking up student certificates."""

    @staticmethod
    def generate_certificate_id() -> str:
        return uuid.uuid4().hex

    @classmethod
    async def create_student(
        cls,
        data: StudentCreate,
        image_filename: Optional[str] = None,
        image_data: Optional[bytes] = None,
    ) -> StudentRead:
        """Issue a certificate record.

        ``image_filename`` and ``image_data`` describe an optional
        uploaded image; when omitted the record's ``image_url`` is
        empty.  Raises ``QRCodeGenerationError`` or ``StorageError`` on
        infrastructure failures; nothing is persisted in that case.
        """
        certificate_id = cls.generate_certificate_id()
        qr_code = await run_in_threadpool(
            generate_qr_data_uri, build_verification_url(certificate_id)
        )

        image_url = ""
        if image_filename and image_data is not None:
            image_url = await run_in_threadpool(save_upload, image_filename, image_data)

        try:
            row = await run_in_threadpool(
                cls._insert_student, certificate_id, data, qr_code, image_url
            )
        except sqlite3.Error as exc:
            logger.error("Could not save certificate %s: %s", certificate_id, exc)
            if image_url:
                await run_in_threadpool(remove_upload, image_url)
            raise StorageError("Could not save certificate record") from exc
        logger.info("Issued certificate %s", certificate_id)
        return cls._row_to_student_read(row)

    @classmethod
    async def list_students(cls) -> List[StudentRead]:
        """Return all certificate records in issuance order."""
        rows = await run_in_threadpool(cls._fetch_all)
        return [cls._row_to_student_read(row) for row in rows]

    @classmethod
    async def get_student(cls, certificate_id: str) -> StudentRead:
        """Look up a record by its public certificate identifier.

        Raises ``CertificateNotFoundError`` when no record matches.
        """
        row = await run_in_threadpool(cls._fetch_one, certificate_id)
        if not row:
            raise CertificateNotFoundError(certificate_id)
        return cls._row_to_student_read(row)

    @staticmethod
    def _insert_student(
        certificate_id: str, data: StudentCreate, qr_code: str, image_url: str
    ) -> sqlite3.Row:
        conn = get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT INTO students (
                    certificate_id, student_name, course_name, certificate_number,
                    passing_year, course_duration, skills, qr_code, image_url
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    certificate_id,
                    data.student_name,
                    data.course_name,
                    data.certificate_number,
                    data.passing_year,
                    data.course_duration,
                    data.skills,
                    qr_code,
                    image_url,
                ),
            )
            conn.commit()
            return cursor.execute(
                "SELECT * FROM students WHERE certificate_id = ?",
                (certificate_id,),
            ).fetchone()
        except sqlite3.Error:
            conn.rollback()
            raise
        finally:
            conn.close()

    @staticmethod
    def _fetch_all() -> List[sqlite3.Row]:
        conn = get_connection()
        try:
            return conn.execute("SELECT * FROM students ORDER BY id ASC").fetchall()
        finally:
            conn.close()

    @staticmethod
    def _fetch_one(certificate_id: str) -> Optional[sqlite3.Row]:
        conn = get_connection()
        try:
            return conn.execute(
                "SELECT * FROM students WHERE certificate_id = ?",
                (certificate_id,),
            ).fetchone()
        finally:
            conn.close()

    @staticmethod
    def _row_to_student_read(row: sqlite3.Row) -> StudentRead:
        return StudentRead(
            certificate_id=row["certificate_id"],
            student_name=row["student_name"],
            course_name=row["course_name"],
            certificate_number=row["certificate_number"],
            passing_year=row["passing_year"],
            course_duration=row["course_duration"],
            skills=row["skills"],
            qr_code=row["qr_code"],
            image_url=row["image_url"],
            created_at=row["created_at"],
        )
