from sqlalchemy import func

from blog_api.db import db
from blog_api.models.comment_model import Comment
from blog_api.models.post_model import Post
from blog_api.models.user_model import User
from blog_api.utils.pagination import page_offset


def _comment_query():
    return (
        db.session.query(Comment, User.name, User.avatar_url, Post.title, Post.slug)
        .join(User, User.id == Comment.user_id)
        .join(Post, Post.id == Comment.post_id)
    )


def _page(query, count_query, page, limit):
    rows = query.offset(page_offset(page, limit)).limit(limit).all()
    return rows, int(count_query.scalar() or 0)


def get_by_id(comment_id: int):
    return db.session.get(Comment, comment_id)


def get_owner_id(comment_id: int):
    return db.session.query(Comment.user_id).filter(Comment.id == comment_id).scalar()


def get_detail(comment_id: int):
    return _comment_query().filter(Comment.id == comment_id).first()


def create_comment(post_id, user_id, text):
    comment = Comment(
        post_id=post_id,
        user_id=user_id,
        text=text
    )
    db.session.add(comment)
    db.session.commit()
    return comment


def update_text(comment, text):
    comment.text = text
    db.session.commit()
    return comment


def delete_comment(comment):
    db.session.delete(comment)
    db.session.commit()


def find_by_post(post_id: int, page: int, limit: int):
    query = (
        _comment_query()
        .filter(Comment.post_id == post_id)
        .order_by(Comment.created_at.asc(), Comment.id.asc())
    )
    count_query = db.session.query(func.count(Comment.id)).filter(Comment.post_id == post_id)
    return _page(query, count_query, page, limit)


def find_by_user(user_id: int, page: int, limit: int):
    query = (
        _comment_query()
        .filter(Comment.user_id == user_id)
        .order_by(Comment.created_at.desc(), Comment.id.desc())
    )
    count_query = db.session.query(func.count(Comment.id)).filter(Comment.user_id == user_id)
    return _page(query, count_query, page, limit)


def find_recent(page: int, limit: int):
    query = (
        _comment_query()
        .filter(Post.published.is_(True))
        .order_by(Comment.created_at.desc(), Comment.id.desc())
    )
    count_query = (
        db.session.query(func.count(Comment.id))
        .join(Post, Post.id == Comment.post_id)
        .filter(Post.published.is_(True))
    )
    return _page(query, count_query, page, limit)
