import logging
import re
from datetime import datetime, timedelta

from blog_api.errors import NotFoundError, ValidationError
from blog_api.repositories import like_repository, post_repository
from blog_api.schemas.post_schema import post_schema
from blog_api.utils.pagination import MAX_DB_INTEGER, pagination_meta


logger = logging.getLogger(__name__)

MIN_TITLE_LENGTH = 3
MAX_TITLE_LENGTH = 255
MIN_BODY_LENGTH = 10
MAX_EXCERPT_LENGTH = 500
MAX_TAGS = 10
MAX_TAG_LENGTH = 50

SORT_LATEST = "latest"
SORT_MOST_LIKED = "most_liked"

TIMEFRAMES = {
    "day": timedelta(days=1),
    "week": timedelta(weeks=1),
    "month": timedelta(days=30),
    "all": None,
}
DEFAULT_TIMEFRAME = "week"

_ASCII_DIGITS = re.compile(r"[0-9]+")


def parse_id(value):
    """Return ``value`` as a database id, or None unless it is plain ASCII digits in range."""
    if not isinstance(value, str) or not _ASCII_DIGITS.fullmatch(value):
        return None
    number = int(value)
    return number if number <= MAX_DB_INTEGER else None


def _validate_title(title):
    if not isinstance(title, str) or not (
        MIN_TITLE_LENGTH <= len(title.strip()) <= MAX_TITLE_LENGTH
    ):
        raise ValidationError("Title must be between 3 and 255 characters")
    return title.strip()


def _validate_body(body):
    if not isinstance(body, str) or len(body.strip()) < MIN_BODY_LENGTH:
        raise ValidationError("Body must be at least 10 characters long")
    return body.strip()


def _validate_excerpt(excerpt):
    if excerpt is None:
        return None
    if not isinstance(excerpt, str) or len(excerpt) > MAX_EXCERPT_LENGTH:
        raise ValidationError("Excerpt must be less than 500 characters")
    return excerpt.strip()


def _validate_image_url(image_url):
    if image_url is not None and not isinstance(image_url, str):
        raise ValidationError("Image URL must be a string")
    return image_url


def normalize_tags(tags):
    """Strip tags and drop duplicates, keeping first-seen order."""
    if tags is None:
        return []

    invalid = ValidationError("Invalid tags format. Maximum 10 tags, each up to 50 characters")
    if not isinstance(tags, list) or len(tags) > MAX_TAGS:
        raise invalid

    normalized = []
    for tag in tags:
        if not isinstance(tag, str) or not tag.strip() or len(tag.strip()) > MAX_TAG_LENGTH:
            raise invalid
        if tag.strip() not in normalized:
            normalized.append(tag.strip())
    return normalized


def parse_tag_filter(raw):
    if not raw:
        return []
    return [tag.strip() for tag in raw.split(",") if tag.strip()]


def serialize_summary(summary, include_author_bio=False):
    payload = post_schema.dump(summary.post)
    payload["author_name"] = summary.author_name
    payload["author_avatar"] = summary.author_avatar
    if include_author_bio:
        payload["author_bio"] = summary.author_bio
    payload["likes_count"] = summary.likes_count
    payload["comments_count"] = summary.comments_count
    if summary.liked_at is not None:
        payload["liked_at"] = summary.liked_at.isoformat()
    return payload


def _page_payload(summaries, page, limit, total):
    return {
        "posts": [serialize_summary(summary) for summary in summaries],
        "pagination": pagination_meta(page, limit, total),
    }


def list_posts(page: int, limit: int, tags=None, author=None, search=None, sort=SORT_LATEST):
    if sort not in (SORT_LATEST, SORT_MOST_LIKED):
        raise ValidationError("Sort must be 'latest' or 'most_liked'")

    author_id = None
    if author not in (None, ""):
        author_id = parse_id(author)
        if author_id is None:
            raise ValidationError("Author must be a numeric user id")

    search = search.strip() if isinstance(search, str) else None

    summaries, total = post_repository.find_posts(
        page,
        limit,
        tags=parse_tag_filter(tags),
        author_id=author_id,
        search=search or None,
        most_liked=sort == SORT_MOST_LIKED,
    )
    return _page_payload(summaries, page, limit, total)


def get_user_posts(user, page: int, limit: int):
    summaries, total = post_repository.find_posts(
        page,
        limit,
        author_id=user.id,
        published_only=False,
    )
    return _page_payload(summaries, page, limit, total)


def get_trending(timeframe, limit: int):
    selected = timeframe if timeframe in TIMEFRAMES else DEFAULT_TIMEFRAME
    window = TIMEFRAMES[selected]
    liked_since = datetime.utcnow() - window if window else None

    summaries, _ = post_repository.find_posts(
        1,
        limit,
        most_liked=True,
        liked_since=liked_since,
    )
    return {
        "posts": [serialize_summary(summary) for summary in summaries],
        "timeframe": selected,
    }


def get_post(identifier: str, viewer=None):
    """Look a post up by numeric id or by slug and count the view.

    Drafts are only visible to their author.
    """
    post_id = parse_id(identifier)
    if post_id is not None:
        summary = post_repository.find_summary_by_id(post_id)
    else:
        summary = post_repository.find_summary_by_slug(identifier)

    if summary is None:
        raise NotFoundError("Post not found")

    post = summary.post
    if not post.published and (viewer is None or viewer.id != post.user_id):
        raise NotFoundError("Post not found")

    post_repository.increment_views(post.id)

    payload = serialize_summary(summary, include_author_bio=True)
    payload["user_liked"] = (
        viewer is not None and like_repository.is_liked_by(post.id, viewer.id)
    )
    return {"post": payload}


def create_post(user, data: dict):
    title = _validate_title(data.get("title"))
    body = _validate_body(data.get("body"))
    excerpt = _validate_excerpt(data.get("excerpt"))
    tags = normalize_tags(data.get("tags"))
    image_url = _validate_image_url(data.get("imageUrl", data.get("image_url")))

    post = post_repository.create_post(
        user_id=user.id,
        title=title,
        body=body,
        excerpt=excerpt,
        image_url=image_url,
        tags=tags,
        published=bool(data.get("published", False)),
    )
    logger.info("New post created: %s by %s", post.slug, user.email)
    return {"post": post_schema.dump(post)}


def _get_post_or_404(post_id: int):
    post = post_repository.get_by_id(post_id)
    if not post:
        raise NotFoundError("Post not found")
    return post


def update_post(post_id: int, data: dict):
    fields = {}
    if "title" in data:
        fields["title"] = _validate_title(data["title"])
    if "excerpt" in data:
        fields["excerpt"] = _validate_excerpt(data["excerpt"])
    if "body" in data:
        fields["body"] = _validate_body(data["body"])
    if "imageUrl" in data or "image_url" in data:
        fields["image_url"] = _validate_image_url(data.get("imageUrl", data.get("image_url")))
    if "tags" in data:
        fields["tags"] = normalize_tags(data["tags"])
    if "published" in data:
        fields["published"] = bool(data["published"])

    if not fields:
        raise ValidationError("No fields to update")

    post = post_repository.update_post(_get_post_or_404(post_id), **fields)
    logger.info("Post updated: %s", post.slug)
    return {"post": post_schema.dump(post)}


def delete_post(post_id: int):
    post_repository.delete_post(_get_post_or_404(post_id))
    logger.info("Post deleted: ID %s", post_id)


def toggle_publish(post_id: int):
    post = _get_post_or_404(post_id)
    post = post_repository.update_post(post, published=not post.published)

    action = "published" if post.published else "unpublished"
    logger.info("Post %s: %s", action, post.slug)
    return f"Post {action} successfully", {"post": post_schema.dump(post)}


def get_post_stats(post_id: int):
    summary = post_repository.find_summary_by_id(post_id)
    if summary is None:
        raise NotFoundError("Post not found")

    post = summary.post
    return {
        "stats": {
            "views": post.views,
            "likes": summary.likes_count,
            "comments": summary.comments_count,
            "published": post.published,
            "created_at": post.created_at.isoformat(),
            "updated_at": post.updated_at.isoformat(),
        }
    }
