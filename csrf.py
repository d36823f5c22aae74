import secrets
from typing import Optional

from itsdangerous import BadSignature, URLSafeTimedSerializer

from config import get_settings

FORM_SALT = "expense-form"


def _serializer() -> URLSafeTimedSerializer:
    settings = get_settings()
    return URLSafeTimedSerializer(settings.csrf_secret, salt=FORM_SALT)


def generate_csrf_token() -> str:
    return _serializer().dumps({"n": secrets.token_urlsafe(8)})


def validate_csrf_token(token: Optional[str], max_age: Optional[int] = None) -> bool:
    if not isinstance(token, str) or not token:
        return False
    if max_age is None:
        max_age = get_settings().csrf_max_age_secs
    try:
        data = _serializer().loads(token, max_age=max_age)
    except BadSignature:
        return False
    return isinstance(data, dict) and "n" in data
