import logging
from functools import wraps

from flask import g
from flask_jwt_extended import create_access_token, get_current_user, verify_jwt_in_request
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError

from blog_api.extensions.extensions import jwt_manager
from blog_api.repositories import user_repository
from blog_api.responses import error_response


logger = logging.getLogger(__name__)


@jwt_manager.user_identity_loader
def _user_identity(user):
    return str(user.id)


@jwt_manager.user_lookup_loader
def _load_user(_jwt_header, jwt_data):
    try:
        user_id = int(jwt_data["sub"])
    except (KeyError, TypeError, ValueError):
        return None
    return user_repository.get_by_id(user_id)


@jwt_manager.unauthorized_loader
def _missing_token(reason):
    logger.warning("Rejected request without token: %s", reason)
    return error_response("Access denied. No token provided.", 401)


@jwt_manager.invalid_token_loader
def _invalid_token(reason):
    logger.warning("Rejected invalid token: %s", reason)
    return error_response("Invalid token", 401)


@jwt_manager.expired_token_loader
def _expired_token(_jwt_header, _jwt_data):
    return error_response("Token expired", 401)


@jwt_manager.user_lookup_error_loader
def _user_no_longer_exists(_jwt_header, jwt_data):
    logger.warning("Token for missing user %s rejected", jwt_data.get("sub"))
    return error_response("Token is valid but user no longer exists", 401)


def issue_token(user) -> str:
    """Signed access token whose subject is the user id; expiry from JWT_ACCESS_TOKEN_EXPIRES."""
    return create_access_token(identity=user)


def get_acting_user():
    return g.get("acting_user")


def auth_required(fn):
    """Run the view only for a valid, unexpired token whose user still exists."""
    @wraps(fn)
    def wrapper(*args, **kwargs):
        verify_jwt_in_request()
        g.acting_user = get_current_user()
        return fn(*args, **kwargs)

    return wrapper


def optional_auth(fn):
    """Attach the acting user when a valid token is present, otherwise run anonymously.

    Any token failure (malformed, bad signature, expired, user deleted) is
    logged and ignored: the view runs with ``get_acting_user()`` returning None.
    """
    @wraps(fn)
    def wrapper(*args, **kwargs):
        g.acting_user = None
        try:
            verify_jwt_in_request(optional=True)
        except (JWTExtendedException, PyJWTError) as e:
            logger.info("Optional auth ignored token: %s", e)
        else:
            g.acting_user = get_current_user()
        return fn(*args, **kwargs)

    return wrapper
