import os
import re
from dataclasses import dataclass
from datetime import timedelta

from dotenv import load_dotenv


load_dotenv()


DEFAULT_ALLOWED_IMAGE_TYPES = ("image/jpeg", "image/png", "image/webp")

_DURATION_UNITS = {
    "s": "seconds",
    "m": "minutes",
    "h": "hours",
    "d": "days",
    "w": "weeks",
}


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_list(name: str, default) -> list:
    raw = os.getenv(name, "").strip()
    if not raw:
        return list(default)
    return [item.strip() for item in raw.split(",") if item.strip()]


def database_url(raw: str) -> str:
    # Bare postgres URLs would select psycopg2; the declared driver is psycopg 3.
    for scheme in ("postgres://", "postgresql://"):
        if raw.startswith(scheme):
            return "postgresql+psycopg://" + raw[len(scheme):]
    return raw


def parse_duration(value: str) -> timedelta:
    """Parse ``7d`` / ``12h`` / ``30m`` / ``45s`` or a plain number of seconds."""
    match = re.fullmatch(r"\s*(\d+)\s*([smhdw]?)\s*", str(value).lower())
    if not match:
        raise ValueError(f"Invalid duration: {value!r}")

    amount, unit = match.groups()
    return timedelta(**{_DURATION_UNITS[unit or "s"]: int(amount)})


class Config:
    APP_ENV = os.getenv("APP_ENV", "development").strip().lower()
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    SQLALCHEMY_DATABASE_URI = database_url(os.getenv("DATABASE_URL", "sqlite:///blog.db"))
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "dev-secret")
    JWT_ACCESS_TOKEN_EXPIRES = parse_duration(os.getenv("JWT_EXPIRES_IN", "7d"))

    MAX_FILE_SIZE = int(os.getenv("MAX_FILE_SIZE", str(5 * 1024 * 1024)))
    ALLOWED_IMAGE_TYPES = _env_list("ALLOWED_IMAGE_TYPES", DEFAULT_ALLOWED_IMAGE_TYPES)
    MAX_UPLOAD_FILES = int(os.getenv("MAX_UPLOAD_FILES", "5"))
    UPLOAD_FOLDER = os.getenv(
        "UPLOAD_FOLDER",
        os.path.join(os.getcwd(), "uploads"),
    )
    APP_PUBLIC_BASE_URL = os.getenv("APP_PUBLIC_BASE_URL", "").strip()

    # Whole-request ceiling; a multi-image request may carry several files.
    MAX_CONTENT_LENGTH = MAX_FILE_SIZE * MAX_UPLOAD_FILES + 1024 * 1024

    # Remote storage is used only when both keys are present.
    MINIO_ENDPOINT = os.getenv("MINIO_ENDPOINT", "localhost:9000")
    MINIO_ACCESS_KEY = os.getenv("MINIO_ACCESS_KEY", "")
    MINIO_SECRET_KEY = os.getenv("MINIO_SECRET_KEY", "")
    MINIO_BUCKET = os.getenv("MINIO_BUCKET", "blog-images")
    MINIO_SECURE = _env_bool("MINIO_SECURE", False)
    MINIO_CONNECT_TIMEOUT = float(os.getenv("MINIO_CONNECT_TIMEOUT", "5"))
    MINIO_READ_TIMEOUT = float(os.getenv("MINIO_READ_TIMEOUT", "20"))
    MINIO_HTTP_POOL_MAXSIZE = int(os.getenv("MINIO_HTTP_POOL_MAXSIZE", "32"))
    MINIO_PUBLIC_BASE_URL = os.getenv(
        "MINIO_PUBLIC_BASE_URL",
        "http://127.0.0.1:9000"
    )

    # Credentialed CORS cannot use a wildcard origin.
    CORS_ALLOWED_ORIGINS = [
        origin for origin in _env_list("CORS_ALLOWED_ORIGINS", ["http://localhost:3000"])
        if origin != "*"
    ]


@dataclass(frozen=True)
class Settings:
    """Runtime settings, built once per app and handed to the components that need them."""

    app_env: str
    max_file_size: int
    allowed_image_types: tuple
    max_upload_files: int
    upload_folder: str
    app_public_base_url: str
    minio_endpoint: str
    minio_access_key: str
    minio_secret_key: str
    minio_bucket: str
    minio_secure: bool
    minio_connect_timeout: float
    minio_read_timeout: float
    minio_http_pool_maxsize: int
    minio_public_base_url: str

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @property
    def use_remote_storage(self) -> bool:
        return bool(self.minio_access_key and self.minio_secret_key)

    @classmethod
    def from_mapping(cls, config) -> "Settings":
        return cls(
            app_env=config.get("APP_ENV", "development"),
            max_file_size=int(config["MAX_FILE_SIZE"]),
            allowed_image_types=tuple(config["ALLOWED_IMAGE_TYPES"]),
            max_upload_files=int(config["MAX_UPLOAD_FILES"]),
            upload_folder=config["UPLOAD_FOLDER"],
            app_public_base_url=config.get("APP_PUBLIC_BASE_URL", "").rstrip("/"),
            minio_endpoint=config["MINIO_ENDPOINT"],
            minio_access_key=config.get("MINIO_ACCESS_KEY", ""),
            minio_secret_key=config.get("MINIO_SECRET_KEY", ""),
            minio_bucket=config["MINIO_BUCKET"],
            minio_secure=bool(config["MINIO_SECURE"]),
            minio_connect_timeout=float(config["MINIO_CONNECT_TIMEOUT"]),
            minio_read_timeout=float(config["MINIO_READ_TIMEOUT"]),
            minio_http_pool_maxsize=int(config.get("MINIO_HTTP_POOL_MAXSIZE", 32)),
            minio_public_base_url=config["MINIO_PUBLIC_BASE_URL"].rstrip("/"),
        )
