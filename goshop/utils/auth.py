import logging
from functools import wraps
from flask import current_app, request
from goshop.services.session import Anonymous, Authenticated
from .jwt import decode_token, TokenError
from .responses import error

logger = logging.getLogger(__name__)

_USER_ID_KEY = "goshop.user_id"


def current_user_id():
    """User id from the session cookie, or None when absent or invalid.

    Cached per request in the WSGI environ.
    """
    environ = request.environ
    if _USER_ID_KEY in environ:
        return environ[_USER_ID_KEY]
    user_id = None
    token = request.cookies.get(current_app.config["SESSION_COOKIE"])
    if token:
        try:
            payload = decode_token(token)
        except TokenError as e:
            logger.info("ignoring session cookie: %s", e)
        else:
            sub = payload.get("sub")
            if current_app.extensions["goshop"].store.get_user(sub):
                user_id = sub
    environ[_USER_ID_KEY] = user_id
    return user_id


def current_cart_token():
    return request.cookies.get(current_app.config["CART_COOKIE"])


def current_identity():
    user_id = current_user_id()
    if user_id:
        return Authenticated(user_id)
    return Anonymous(current_cart_token())


def _cookie_kwargs():
    cfg = current_app.config
    return {
        "httponly": True,
        "samesite": "Lax",
        "secure": cfg.get("COOKIE_SECURE", False),
        "max_age": cfg["SESSION_LIFETIME_DAYS"] * 24 * 60 * 60,
    }


def set_session_cookie(resp, token):
    resp.set_cookie(current_app.config["SESSION_COOKIE"], token, **_cookie_kwargs())
    return resp


def set_cart_cookie(resp, token):
    resp.set_cookie(current_app.config["CART_COOKIE"], token, **_cookie_kwargs())
    return resp


def auth_required(func):
    @wraps(func)
    def wrapper(*args, **kwargs):
        user_id = current_user_id()
        if not user_id:
            return error("unauthorized", status=401)
        request.user = current_app.extensions["goshop"].store.get_user(user_id)
        return func(*args, **kwargs)

    return wrapper
