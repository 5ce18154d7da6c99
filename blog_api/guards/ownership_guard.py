from functools import wraps
from typing import Callable, NamedTuple

from blog_api.errors import NotFoundError, PermissionDeniedError
from blog_api.guards.auth_guard import get_acting_user
from blog_api.repositories import comment_repository, post_repository


class OwnedResource(NamedTuple):
    fetch_owner_id: Callable
    view_arg: str


# Adding an owned resource type only needs an entry here.
OWNED_RESOURCES = {
    "post": OwnedResource(post_repository.get_owner_id, "post_id"),
    "comment": OwnedResource(comment_repository.get_owner_id, "comment_id"),
}


def owns(kind: str):
    """Allow the view only when the acting user owns the ``kind`` named by the URL.

    Must be stacked under ``auth_required``. Raises NotFoundError when the
    resource does not exist and PermissionDeniedError when someone else owns it.
    """
    if kind not in OWNED_RESOURCES:
        raise ValueError(f"Invalid resource type: {kind}")
    resource = OWNED_RESOURCES[kind]

    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            user = get_acting_user()
            if user is None:
                raise RuntimeError(f"owns({kind!r}) requires an authenticated user")

            owner_id = resource.fetch_owner_id(kwargs[resource.view_arg])
            if owner_id is None:
                raise NotFoundError(f"{kind.capitalize()} not found")
            if owner_id != user.id:
                raise PermissionDeniedError(f"Access denied. You don't own this {kind}.")

            return fn(*args, **kwargs)

        return wrapper

    return decorator
