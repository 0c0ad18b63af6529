import os
from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: str = "False") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Settings:
    database_url: str = os.getenv(
        "DATABASE_URL",
        "sqlite+aiosqlite:///./admin.db"
    )
    database_echo: bool = _env_bool("DATABASE_ECHO")

    # Session cookie
    auth_secret: str = os.getenv("AUTH_SECRET", "dev_secret_change_me")
    session_cookie_name: str = os.getenv("SESSION_COOKIE_NAME", "admin_session")
    session_max_age: int = int(os.getenv("SESSION_MAX_AGE", str(60 * 60 * 12)))
    cookie_secure: bool = _env_bool("COOKIE_SECURE")

    # Bootstrap superuser
    admin_email: str = os.getenv("ADMIN_EMAIL", "admin@example.com")
    admin_password: str = os.getenv("ADMIN_PASSWORD", "admin123")

    # Local uploads
    upload_dir: str = os.getenv("UPLOAD_DIR", os.path.join(".", "public", "uploads"))
    upload_url_prefix: str = os.getenv("UPLOAD_URL_PREFIX", "/uploads/")
    upload_max_bytes: int = int(os.getenv("UPLOAD_MAX_BYTES", str(5 * 1024 * 1024)))

    cors_origins: list = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()


settings = Settings()
