from sqlalchemy import func

from blog_api.db import db
from blog_api.models.comment_model import Comment
from blog_api.models.like_model import Like
from blog_api.models.post_model import Post
from blog_api.models.user_model import User


def get_by_id(user_id: int):
    return db.session.get(User, user_id)


def get_by_email(email: str):
    return User.query.filter_by(email=email).first()


def create_user(name, email, password_hash):
    user = User(
        name=name,
        email=email,
        password_hash=password_hash
    )
    db.session.add(user)
    db.session.commit()
    return user


def update_profile(user, **fields):
    for key, value in fields.items():
        setattr(user, key, value)
    db.session.commit()
    return user


def set_password_hash(user, password_hash):
    user.password_hash = password_hash
    db.session.commit()


def delete_user(user):
    # Posts, comments and likes go with the user through ON DELETE CASCADE.
    db.session.delete(user)
    db.session.commit()


def get_stats(user_id: int) -> dict:
    total_posts = (
        db.session.query(func.count(Post.id))
        .filter(Post.user_id == user_id)
        .scalar()
    )
    total_views = (
        db.session.query(func.coalesce(func.sum(Post.views), 0))
        .filter(Post.user_id == user_id)
        .scalar()
    )
    total_comments = (
        db.session.query(func.count(Comment.id))
        .filter(Comment.user_id == user_id)
        .scalar()
    )
    total_likes = (
        db.session.query(func.count(Like.id))
        .join(Post, Post.id == Like.post_id)
        .filter(Post.user_id == user_id)
        .scalar()
    )

    return {
        "total_posts": int(total_posts or 0),
        "total_comments": int(total_comments or 0),
        "total_likes": int(total_likes or 0),
        "total_views": int(total_views or 0),
    }
