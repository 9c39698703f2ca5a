import logging
from flask import Blueprint, current_app, make_response, request
from flask_limiter.util import get_remote_address
from goshop.extensions import limiter, shop
from goshop.schemas.auth import SigninRequest, SignupRequest
from goshop.services.errors import NotAuthenticated
from goshop.utils import (
    create_session_token,
    current_user_id,
    ok,
    set_session_cookie,
    validate_schema,
)
from goshop.version import API_PREFIX

logger = logging.getLogger(__name__)

auth_bp = Blueprint("auth", __name__, url_prefix=f"{API_PREFIX}/auth")


def _signed_in(user, status=200):
    resp, code = ok({"user": user.public_dict()}, status=status)
    return set_session_cookie(resp, create_session_token(user.id)), code


@auth_bp.route("/signup", methods=["POST"])
@limiter.limit(
    lambda: current_app.config["SIGNUP_LIMIT_PER_IP"],
    key_func=get_remote_address,
    error_message="Too many signups from this IP",
)
@validate_schema(SignupRequest)
def signup():
    data: SignupRequest = request.validated_data
    user = shop().accounts.signup(
        username=data.username,
        email=str(data.email),
        password=data.password,
        name=data.name,
        location=data.location,
    )
    return _signed_in(user, status=201)


@auth_bp.route("/signin", methods=["POST"])
@limiter.limit(
    lambda: current_app.config["SIGNIN_LIMIT_PER_IP"],
    key_func=get_remote_address,
    error_message="Too many sign-in attempts from this IP",
)
@validate_schema(SigninRequest)
def signin():
    data: SigninRequest = request.validated_data
    user = shop().accounts.authenticate(data.username_or_email, data.password)
    logger.info("user %s signed in", user.id)
    return _signed_in(user)


@auth_bp.route("/signout", methods=["POST"])
def signout():
    resp = make_response("", 204)
    resp.delete_cookie(current_app.config["SESSION_COOKIE"])
    return resp


@auth_bp.route("/me", methods=["GET"])
def me():
    user_id = current_user_id()
    if not user_id:
        raise NotAuthenticated()
    return ok({"user": shop().accounts.get(user_id).public_dict()})
