"""
Domain exceptions for the certificate registry.

Services raise these instead of ``HTTPException`` so the business
logic stays independent of the web layer.  Endpoints translate the
client-side errors (validation, not found, authentication) into 4xx
responses; infrastructure errors are turned into a generic 500 by the
handlers registered in ``main.create_app``.
"""


class CertificateRegistryError(Exception):
    """Base exception for all certificate registry errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class EmailAlreadyRegisteredError(CertificateRegistryError):
    """An account with this email already exists."""

    def __init__(self, email: str):
        super().__init__(f"Email already registered: {email}")
        self.email = email


class CertificateNotFoundError(CertificateRegistryError):
    """No certificate record matches the given identifier."""

    def __init__(self, certificate_id: str):
        super().__init__(f"Certificate {certificate_id} not found")
        self.certificate_id = certificate_id


class AuthenticationError(CertificateRegistryError):
    """Credentials or session token were rejected."""

    def __init__(self, message: str = "Authentication failed"):
        super().__init__(message)


class StorageError(CertificateRegistryError):
    """The record store or the upload folder is unavailable."""

    def __init__(self, message: str = "Storage unavailable"):
        super().__init__(message)


class QRCodeGenerationError(CertificateRegistryError):
    """The verification QR code could not be rendered."""

    def __init__(self, message: str = "QR code generation failed"):
        super().__init__(message)
