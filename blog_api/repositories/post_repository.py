from datetime import datetime
from typing import NamedTuple

from sqlalchemy import distinct, func, or_, select

from blog_api.db import db
from blog_api.models.comment_model import Comment
from blog_api.models.like_model import Like
from blog_api.models.post_model import Post, PostTag
from blog_api.models.user_model import User
from blog_api.utils.pagination import page_offset
from blog_api.utils.slugs import unique_slug


LIKE_ESCAPE = "\\"

# Likes and comments are both joined onto the post row, so each count has to
# be distinct or one would multiply the other.
likes_count = func.count(distinct(Like.id))
comments_count = func.count(distinct(Comment.id))


class PostSummary(NamedTuple):
    post: Post
    author_name: str
    author_avatar: str | None
    author_bio: str | None
    likes_count: int
    comments_count: int
    liked_at: datetime | None = None


def _escape_like(term: str) -> str:
    return (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def build_post_criteria(tags=None, author_id=None, search=None, published_only=True):
    """Return the WHERE predicates shared by a post page query and its count query.

    A search term switches to search mode: a case-insensitive substring match
    over title, excerpt and body, with the tag and author filters ignored.
    Otherwise a post matches ``tags`` when it carries at least one of them.
    """
    criteria = []
    if published_only:
        criteria.append(Post.published.is_(True))

    if search:
        pattern = f"%{_escape_like(search)}%"
        criteria.append(
            or_(
                Post.title.ilike(pattern, escape=LIKE_ESCAPE),
                Post.excerpt.ilike(pattern, escape=LIKE_ESCAPE),
                Post.body.ilike(pattern, escape=LIKE_ESCAPE),
            )
        )
        return criteria

    if tags:
        tagged_posts = select(PostTag.post_id).where(PostTag.tag.in_(list(tags)))
        criteria.append(Post.id.in_(tagged_posts))

    if author_id is not None:
        criteria.append(Post.user_id == author_id)

    return criteria


def post_summary_query(*extra_columns):
    return (
        db.session.query(
            Post,
            User.name,
            User.avatar_url,
            User.bio,
            likes_count,
            comments_count,
            *extra_columns,
        )
        .join(User, User.id == Post.user_id)
        .outerjoin(Like, Like.post_id == Post.id)
        .outerjoin(Comment, Comment.post_id == Post.id)
        .group_by(Post.id, User.name, User.avatar_url, User.bio, *extra_columns)
    )


def to_post_summary(row) -> PostSummary:
    post, author_name, author_avatar, author_bio, likes, comments, *extra = row
    return PostSummary(
        post=post,
        author_name=author_name,
        author_avatar=author_avatar,
        author_bio=author_bio,
        likes_count=int(likes or 0),
        comments_count=int(comments or 0),
        liked_at=extra[0] if extra else None,
    )


def _has_likes(liked_since=None):
    subquery = select(Like.id).where(Like.post_id == Post.id)
    if liked_since is not None:
        subquery = subquery.where(Like.created_at >= liked_since)
    return subquery.exists()


def find_posts(
    page: int,
    limit: int,
    tags=None,
    author_id=None,
    search=None,
    published_only=True,
    most_liked=False,
    liked_since=None,
):
    """Return ``(summaries, total)`` for one page of posts.

    ``total`` comes from a separate count over the same predicate, so it does
    not depend on the page window. With ``most_liked`` only posts with at least
    one like (since ``liked_since`` when given) are kept, ordered by like count.
    """
    criteria = build_post_criteria(tags, author_id, search, published_only)

    query = post_summary_query().filter(*criteria)
    count_query = db.session.query(func.count(Post.id)).filter(*criteria)

    if most_liked:
        if liked_since is not None:
            query = query.filter(Like.created_at >= liked_since)
        query = query.having(likes_count > 0).order_by(
            likes_count.desc(),
            Post.created_at.desc(),
            Post.id.desc(),
        )
        count_query = count_query.filter(_has_likes(liked_since))
    else:
        query = query.order_by(Post.created_at.desc(), Post.id.desc())

    rows = query.offset(page_offset(page, limit)).limit(limit).all()
    total = count_query.scalar()

    return [to_post_summary(row) for row in rows], int(total or 0)


def find_summary_by_id(post_id: int):
    row = post_summary_query().filter(Post.id == post_id).first()
    return to_post_summary(row) if row else None


def find_summary_by_slug(slug: str):
    row = post_summary_query().filter(Post.slug == slug).first()
    return to_post_summary(row) if row else None


def get_by_id(post_id: int):
    return db.session.get(Post, post_id)


def get_owner_id(post_id: int):
    return db.session.query(Post.user_id).filter(Post.id == post_id).scalar()


def slug_exists(slug: str, exclude_id=None) -> bool:
    query = db.session.query(Post.id).filter(Post.slug == slug)
    if exclude_id is not None:
        query = query.filter(Post.id != exclude_id)
    return query.first() is not None


def generate_unique_slug(title: str, exclude_id=None) -> str:
    return unique_slug(title, lambda candidate: slug_exists(candidate, exclude_id))


def create_post(user_id, title, body, excerpt=None, image_url=None, tags=(), published=False):
    post = Post(
        user_id=user_id,
        title=title,
        excerpt=excerpt,
        body=body,
        image_url=image_url,
        slug=generate_unique_slug(title),
        published=published,
    )
    post.set_tags(tags)

    db.session.add(post)
    db.session.commit()
    return post


def update_post(post, **fields):
    if "title" in fields:
        post.slug = generate_unique_slug(fields["title"], exclude_id=post.id)

    tags = fields.pop("tags", None)
    if tags is not None:
        post.set_tags(tags)

    for key, value in fields.items():
        setattr(post, key, value)

    db.session.commit()
    return post


def delete_post(post):
    db.session.delete(post)
    db.session.commit()


def increment_views(post_id: int):
    # Keep updated_at untouched; a view is not an edit.
    Post.query.filter(Post.id == post_id).update(
        {Post.views: Post.views + 1, Post.updated_at: Post.updated_at},
        synchronize_session=False,
    )
    db.session.commit()
