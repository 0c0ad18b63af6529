from typing import Optional
from urllib.parse import urlparse

from core.config import settings


def clean_name(v: str, min_length: int = 2) -> str:
    v = (v or "").strip()
    if len(v) < min_length:
        raise ValueError(f"must be at least {min_length} characters")
    return v


def validate_link(v: str) -> str:
    v = (v or "").strip()
    parsed = urlparse(v)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError("must be an absolute http(s) URL")
    return v


def validate_image_url(v: Optional[str]) -> Optional[str]:
    """Accept null, "", an uploaded file address, or an absolute URL."""
    if v is None:
        return None
    v = v.strip()
    if v == "":
        return None
    if v.startswith(settings.upload_url_prefix) or v.lower().startswith(("http://", "https://")):
        return v
    raise ValueError(f"image_url must be empty, a full URL, or {settings.upload_url_prefix}...")
