from .responses import ok, error, no_content, validation_error_response
from .auth import (
    auth_required,
    current_identity,
    current_user_id,
    current_cart_token,
    set_session_cookie,
    set_cart_cookie,
)
from .validation import validate_schema
from .jwt import create_session_token, decode_token, TokenError

__all__ = [
    'ok',
    'error',
    'no_content',
    'validation_error_response',
    'auth_required',
    'current_identity',
    'current_user_id',
    'current_cart_token',
    'set_session_cookie',
    'set_cart_cookie',
    'validate_schema',
    'create_session_token',
    'decode_token',
    'TokenError',
]
