import logging
import re

from werkzeug.security import check_password_hash, generate_password_hash

from blog_api.errors import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from blog_api.guards.auth_guard import issue_token
from blog_api.repositories import user_repository
from blog_api.schemas.user_schema import public_user_schema, user_schema


logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_NAME_LENGTH = 2
MAX_NAME_LENGTH = 100
MIN_PASSWORD_LENGTH = 6
MAX_BIO_LENGTH = 500


def _require_non_empty_string(value):
    return isinstance(value, str) and value.strip()


def _valid_name(name) -> bool:
    return (
        _require_non_empty_string(name)
        and MIN_NAME_LENGTH <= len(name.strip()) <= MAX_NAME_LENGTH
    )


def _valid_email(email) -> bool:
    return isinstance(email, str) and EMAIL_PATTERN.match(email.strip()) is not None


def _valid_password(password) -> bool:
    return isinstance(password, str) and len(password) >= MIN_PASSWORD_LENGTH


def _profile_payload(user, schema):
    payload = schema.dump(user)
    payload["stats"] = user_repository.get_stats(user.id)
    return {"user": payload}


def register(name, email, password):
    if not _valid_name(name):
        raise ValidationError("Name must be at least 2 characters long")
    if not _valid_email(email):
        raise ValidationError("Please provide a valid email address")
    if not _valid_password(password):
        raise ValidationError("Password must be at least 6 characters long")

    email = email.strip().lower()
    if user_repository.get_by_email(email):
        raise ConflictError("User already exists with this email")

    user = user_repository.create_user(
        name=name.strip(),
        email=email,
        password_hash=generate_password_hash(password),
    )
    logger.info("New user registered: %s", user.email)

    return {"user": user_schema.dump(user), "token": issue_token(user)}


def login(email, password):
    if not _require_non_empty_string(email) or not _require_non_empty_string(password):
        raise ValidationError("Please provide email and password")
    if not _valid_email(email):
        raise ValidationError("Please provide a valid email address")

    user = user_repository.get_by_email(email.strip().lower())
    if not user or not check_password_hash(user.password_hash, password):
        raise AuthenticationError("Invalid email or password")

    logger.info("User logged in: %s", user.email)
    return {"user": user_schema.dump(user), "token": issue_token(user)}


def get_profile(user):
    return _profile_payload(user, user_schema)


def get_public_profile(user_id: int):
    user = user_repository.get_by_id(user_id)
    if not user:
        raise NotFoundError("User not found")
    return _profile_payload(user, public_user_schema)


def update_profile(user, data: dict):
    fields = {}

    if "name" in data:
        name = data["name"]
        if not _valid_name(name):
            raise ValidationError("Name must be at least 2 characters long")
        fields["name"] = name.strip()

    if "bio" in data:
        bio = data["bio"]
        if bio is not None and not isinstance(bio, str):
            raise ValidationError("Bio must be a string")
        if bio and len(bio) > MAX_BIO_LENGTH:
            raise ValidationError("Bio must be less than 500 characters")
        fields["bio"] = bio.strip() if bio else bio

    avatar_key = "avatarUrl" if "avatarUrl" in data else "avatar_url"
    if avatar_key in data:
        avatar_url = data[avatar_key]
        if avatar_url is not None and not isinstance(avatar_url, str):
            raise ValidationError("Avatar URL must be a string")
        fields["avatar_url"] = avatar_url

    if not fields:
        raise ValidationError("No fields to update")

    user_repository.update_profile(user, **fields)
    logger.info("User profile updated: %s", user.email)
    return {"user": user_schema.dump(user)}


def change_password(user, current_password, new_password):
    if not _require_non_empty_string(current_password) or not _require_non_empty_string(new_password):
        raise ValidationError("Please provide current and new password")
    if not _valid_password(new_password):
        raise ValidationError("New password must be at least 6 characters long")
    if current_password == new_password:
        raise ValidationError("New password must be different from current password")
    if not check_password_hash(user.password_hash, current_password):
        raise ValidationError("Current password is incorrect")

    user_repository.set_password_hash(user, generate_password_hash(new_password))
    logger.info("Password changed for user: %s", user.email)


def delete_account(user, password):
    if not _require_non_empty_string(password):
        raise ValidationError("Please provide your password to confirm account deletion")
    if not check_password_hash(user.password_hash, password):
        raise AuthenticationError("Invalid password")

    email = user.email
    user_repository.delete_user(user)
    logger.info("User account deleted: %s", email)
