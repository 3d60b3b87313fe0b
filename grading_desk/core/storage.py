"""Time-limited signed URLs for submitted files.

The files themselves live in object storage; this service only hands out
URLs whose token encodes the storage key, the disposition and the time it
was issued. The storage gateway verifies the token with the same secret.
"""

import logging
from urllib.parse import quote

from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from grading_desk.core.config import SIGNED_URL_EXPIRES_SECONDS, SIGNING_SECRET, STORAGE_BASE_URL

logger = logging.getLogger(__name__)

_serializer = URLSafeTimedSerializer(SIGNING_SECRET, salt="submission-file")


class InvalidSignedUrl(Exception):
    pass


def _signed_url(s3_key: str, disposition: str, content_type: str | None) -> str:
    token = _serializer.dumps(
        {"key": s3_key, "disposition": disposition, "content_type": content_type}
    )
    return f"{STORAGE_BASE_URL}/{quote(s3_key, safe='/')}?token={token}"


def generate_display_url(s3_key: str, content_type: str | None = None) -> str:
    return _signed_url(s3_key, "inline", content_type)


def generate_download_url(s3_key: str, file_name: str) -> str:
    disposition = f'attachment; filename="{file_name}"'
    return _signed_url(s3_key, disposition, "application/octet-stream")


def verify_token(token: str, max_age: int = SIGNED_URL_EXPIRES_SECONDS) -> dict:
    """Return the signed claims, or raise InvalidSignedUrl if forged or expired."""
    try:
        return _serializer.loads(token, max_age=max_age)
    except SignatureExpired as e:
        logger.info("signed url expired: %s", e)
        raise InvalidSignedUrl("Signed URL has expired") from e
    except BadSignature as e:
        logger.warning("signed url rejected: %s", e)
        raise InvalidSignedUrl("Signed URL is invalid") from e
