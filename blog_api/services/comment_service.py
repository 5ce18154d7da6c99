import logging

from blog_api.errors import NotFoundError, PermissionDeniedError, ValidationError
from blog_api.repositories import comment_repository, post_repository
from blog_api.schemas.comment_schema import comment_schema
from blog_api.utils.pagination import pagination_meta


logger = logging.getLogger(__name__)

MAX_COMMENT_LENGTH = 1000


def _comment_text(data: dict) -> str:
    text = data.get("content", data.get("text"))
    if not isinstance(text, str) or not text.strip():
        raise ValidationError("Comment content is required")
    if len(text.strip()) > MAX_COMMENT_LENGTH:
        raise ValidationError("Comment must be between 1 and 1000 characters")
    return text.strip()


def serialize_comment(row):
    comment, author_name, author_avatar, post_title, post_slug = row
    payload = comment_schema.dump(comment)
    payload["author_name"] = author_name
    payload["author_avatar"] = author_avatar
    payload["post_title"] = post_title
    payload["post_slug"] = post_slug
    return payload


def _page_payload(rows, page, limit, total):
    return {
        "comments": [serialize_comment(row) for row in rows],
        "pagination": pagination_meta(page, limit, total),
    }


def _detail_or_404(comment_id: int):
    row = comment_repository.get_detail(comment_id)
    if row is None:
        raise NotFoundError("Comment not found")
    return {"comment": serialize_comment(row)}


def list_by_post(post_id: int, page: int, limit: int):
    if post_repository.get_owner_id(post_id) is None:
        raise NotFoundError("Post not found")

    rows, total = comment_repository.find_by_post(post_id, page, limit)
    return _page_payload(rows, page, limit, total)


def get_comment(comment_id: int):
    return _detail_or_404(comment_id)


def create_comment(user, post_id: int, data: dict):
    text = _comment_text(data)

    post = post_repository.get_by_id(post_id)
    if not post:
        raise NotFoundError("Post not found")
    if not post.published:
        raise PermissionDeniedError("Cannot comment on unpublished post")

    comment = comment_repository.create_comment(post_id=post.id, user_id=user.id, text=text)
    logger.info("New comment created on post %s by %s", post.id, user.email)
    return _detail_or_404(comment.id)


def update_comment(comment_id: int, data: dict):
    text = _comment_text(data)

    comment = comment_repository.get_by_id(comment_id)
    if not comment:
        raise NotFoundError("Comment not found")

    comment_repository.update_text(comment, text)
    logger.info("Comment updated: ID %s", comment_id)
    return _detail_or_404(comment_id)


def delete_comment(comment_id: int):
    comment = comment_repository.get_by_id(comment_id)
    if not comment:
        raise NotFoundError("Comment not found")

    comment_repository.delete_comment(comment)
    logger.info("Comment deleted: ID %s", comment_id)


def get_user_comments(user, page: int, limit: int):
    rows, total = comment_repository.find_by_user(user.id, page, limit)
    return _page_payload(rows, page, limit, total)


def get_recent_comments(limit: int):
    rows, _ = comment_repository.find_recent(1, limit)
    return {"comments": [serialize_comment(row) for row in rows]}
