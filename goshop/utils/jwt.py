import datetime as dt
from typing import Dict
import jwt
from flask import current_app


class TokenError(Exception):
    pass


def _secret() -> str:
    return current_app.config["JWT_SECRET"]


def create_session_token(user_id: str) -> str:
    days = current_app.config["SESSION_LIFETIME_DAYS"]
    payload: Dict = {
        "sub": user_id,
        "type": "session",
        "exp": dt.datetime.now(dt.timezone.utc) + dt.timedelta(days=days),
    }
    return jwt.encode(payload, _secret(), algorithm="HS256")


def decode_token(token: str, expected_type: str = "session") -> Dict:
    try:
        data = jwt.decode(token, _secret(), algorithms=["HS256"])
    except jwt.ExpiredSignatureError:
        raise TokenError("token expired")
    except jwt.InvalidTokenError:
        raise TokenError("invalid token")

    if data.get("type") != expected_type:
        raise TokenError(f"expected {expected_type} token")
    return data
