"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  A ``.env`` file in the working directory is
loaded first so local deployments can keep their secrets out of the
shell.  Defaults are provided for all fields; override them in
production, in particular ``JWT_SECRET``.
"""

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


DEFAULT_SECRET_KEY = "change_me"


def _as_bool(value: str) -> bool:
    return value.lower() in {"1", "true", "yes"}


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Certificate Registry API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = _as_bool(os.getenv("DEBUG", "false"))
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")

    # Secret used to sign session tokens.  ``JWT_SECRET`` is the name the
    # original deployment used; ``SECRET_KEY`` is accepted as well.
    secret_key: str = os.getenv("JWT_SECRET", os.getenv("SECRET_KEY", DEFAULT_SECRET_KEY))
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))
    algorithm: str = os.getenv("ALGORITHM", "HS256")

    # PBKDF2 iteration count.  100k iterations keeps a single hash in the
    # tens of milliseconds on commodity hardware.
    password_hash_iterations: int = int(os.getenv("PASSWORD_HASH_ITERATIONS", "100000"))

    # Path to the SQLite database.  Relative paths are resolved against
    # the project root by ``core.db``.
    database_url: str = os.getenv("DATABASE_URL", "certificates.db")

    # Base URL of the public verification page.  The QR code on each
    # certificate points to ``<base>/student/<certificate_id>``.
    verification_base_url: str = os.getenv(
        "VERIFICATION_BASE_URL", os.getenv("STRAPI", "http://localhost:3000")
    )

    # Folder that receives uploaded certificate images.
    upload_dir: str = os.getenv("UPLOAD_DIR", "uploads")

    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "5000"))

    # Comma‑separated list of allowed CORS origins; ``*`` allows any.
    cors_origins: str = os.getenv("CORS_ORIGINS", "*")

    # When enabled, ``POST /api/students`` requires a valid session token.
    protect_student_creation: bool = _as_bool(os.getenv("PROTECT_STUDENT_CREATION", "false"))

    @property
    def cors_origin_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables must
# be set before this module is imported.
settings = Settings()


def check_secret_key(config: Settings) -> None:
    """Refuse to sign tokens with the public default secret.

    With ``DEBUG`` on the default is tolerated with a warning so local
    development works without a ``.env`` file.
    """
    if config.secret_key != DEFAULT_SECRET_KEY:
        return
    if not config.debug:
        raise RuntimeError("JWT_SECRET is not set; refusing to start with the default signing secret")
    logging.getLogger(__name__).warning(
        "JWT_SECRET is not set; tokens are signed with the default secret (debug mode only)"
    )
