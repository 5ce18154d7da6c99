import logging

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import aliased

from blog_api.db import db
from blog_api.errors import classify_integrity_error
from blog_api.models.like_model import Like
from blog_api.models.post_model import Post
from blog_api.models.user_model import User
from blog_api.repositories.post_repository import post_summary_query, to_post_summary
from blog_api.utils.pagination import page_offset


logger = logging.getLogger(__name__)


def is_liked_by(post_id: int, user_id: int) -> bool:
    return (
        Like.query.filter_by(post_id=post_id, user_id=user_id).first()
        is not None
    )


def toggle(post_id: int, user_id: int) -> bool:
    """Flip the like for ``(post_id, user_id)`` and return whether it is now liked.

    The check and the write are separate statements. If a concurrent request
    inserts the same pair first, the unique constraint rejects this insert and
    the toggle is reported as liked without failing.
    """
    if is_liked_by(post_id, user_id):
        Like.query.filter_by(post_id=post_id, user_id=user_id).delete()
        db.session.commit()
        return False

    db.session.add(Like(post_id=post_id, user_id=user_id))
    try:
        db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        status_code, _ = classify_integrity_error(e)
        if status_code != 409:
            raise
        logger.info("Post %s already liked by user %s, insert skipped", post_id, user_id)

    return True


def count_for_post(post_id: int) -> int:
    return Like.query.filter_by(post_id=post_id).count()


def find_likers(post_id: int, page: int, limit: int):
    rows = (
        db.session.query(
            Like.created_at,
            User.id.label("user_id"),
            User.name.label("user_name"),
            User.avatar_url.label("user_avatar"),
        )
        .join(User, User.id == Like.user_id)
        .filter(Like.post_id == post_id)
        .order_by(Like.created_at.desc(), Like.id.desc())
        .offset(page_offset(page, limit))
        .limit(limit)
        .all()
    )
    return rows, count_for_post(post_id)


def find_liked_posts(user_id: int, page: int, limit: int):
    liker = aliased(Like)
    rows = (
        post_summary_query(liker.created_at)
        .join(liker, (liker.post_id == Post.id) & (liker.user_id == user_id))
        .filter(Post.published.is_(True))
        .order_by(liker.created_at.desc(), Post.id.desc())
        .offset(page_offset(page, limit))
        .limit(limit)
        .all()
    )
    total = (
        db.session.query(func.count(Like.id))
        .join(Post, Post.id == Like.post_id)
        .filter(Like.user_id == user_id, Post.published.is_(True))
        .scalar()
    )
    return [to_post_summary(row) for row in rows], int(total or 0)


def get_user_stats(user_id: int) -> dict:
    given = Like.query.filter_by(user_id=user_id).count()
    received = (
        db.session.query(func.count(Like.id))
        .join(Post, Post.id == Like.post_id)
        .filter(Post.user_id == user_id)
        .scalar()
    )
    return {
        "total_likes_given": int(given),
        "total_likes_received": int(received or 0),
    }
