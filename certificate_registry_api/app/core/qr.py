"""
QR code helpers for certificate verification links.

Every certificate carries a QR code pointing at its public
verification page.  The code is rendered as a PNG and embedded in the
record as a ``data:`` URI so clients can display it without another
request.
"""

import base64
import io
import logging

import qrcode
from qrcode.constants import ERROR_CORRECT_M

from .config import settings
from .exceptions import QRCodeGenerationError

logger = logging.getLogger(__name__)


def build_verification_url(certificate_id: str) -> str:
    """Return the public verification URL for a certificate."""
    base = settings.verification_base_url.rstrip("/")
    return f"{base}/student/{certificate_id}"


def generate_qr_data_uri(data: str) -> str:
    """Encode ``data`` as a QR code and return it as a PNG data URI.

    Raises
    ------
    QRCodeGenerationError
        If the payload cannot be encoded or rendered.
    """
    try:
        qr = qrcode.QRCode(
            error_correction=ERROR_CORRECT_M,
            box_size=4,
            border=4,
        )
        qr.add_data(data)
        qr.make(fit=True)
        img = qr.make_image(fill_color="black", back_color="white")

        buffer = io.BytesIO()
        img.save(buffer, format="PNG")
    except Exception as exc:
        logger.error("Failed to render QR code for %s: %s", data, exc)
        raise QRCodeGenerationError() from exc

    encoded = base64.b64encode(buffer.getvalue()).decode("utf-8")
    return f"data:image/png;base64,{encoded}"
