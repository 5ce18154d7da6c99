import logging

from blog_api.errors import NotFoundError, PermissionDeniedError
from blog_api.repositories import like_repository, post_repository
from blog_api.schemas.like_schema import liker_schema
from blog_api.services.post_service import get_trending, serialize_summary
from blog_api.utils.pagination import pagination_meta


logger = logging.getLogger(__name__)


def _require_post(post_id: int):
    post = post_repository.get_by_id(post_id)
    if not post:
        raise NotFoundError("Post not found")
    return post


def toggle_like(user, post_id: int):
    post = _require_post(post_id)
    if not post.published:
        raise PermissionDeniedError("Cannot like unpublished post")

    liked = like_repository.toggle(post.id, user.id)
    action = "liked" if liked else "unliked"
    logger.info("Post %s %s by %s", post.id, action, user.email)

    return {
        "liked": liked,
        "action": action,
        "like_count": like_repository.count_for_post(post.id),
    }


def get_like_count(post_id: int):
    _require_post(post_id)
    return {
        "post_id": post_id,
        "like_count": like_repository.count_for_post(post_id),
    }


def check_like(viewer, post_id: int):
    if viewer is None:
        return {"liked": False}
    return {"liked": like_repository.is_liked_by(post_id, viewer.id)}


def get_likers(post_id: int, page: int, limit: int):
    _require_post(post_id)
    rows, total = like_repository.find_likers(post_id, page, limit)
    return {
        "users": liker_schema.dump([dict(row._mapping) for row in rows], many=True),
        "pagination": pagination_meta(page, limit, total),
    }


def get_liked_posts(user, page: int, limit: int):
    summaries, total = like_repository.find_liked_posts(user.id, page, limit)
    return {
        "posts": [serialize_summary(summary) for summary in summaries],
        "pagination": pagination_meta(page, limit, total),
    }


def get_trending_posts(timeframe, limit: int):
    return get_trending(timeframe, limit)


def get_user_like_stats(user):
    return {"stats": like_repository.get_user_stats(user.id)}
