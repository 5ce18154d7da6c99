import re


_DISALLOWED = re.compile(r"[^a-z0-9 -]")
_WHITESPACE = re.compile(r"\s+")
_HYPHENS = re.compile(r"-+")

FALLBACK_SLUG = "post"


def slugify(title: str) -> str:
    slug = _DISALLOWED.sub("", title.lower())
    slug = _WHITESPACE.sub("-", slug)
    slug = _HYPHENS.sub("-", slug)
    return slug.strip("-")


def unique_slug(title: str, is_taken) -> str:
    """Return the first of ``base``, ``base-1``, ``base-2`` ... for which ``is_taken`` is false.

    ``is_taken`` is a probe against the store. Two concurrent callers can both
    see the same slug as free; the unique constraint on ``posts.slug`` decides
    which insert wins.
    """
    base = slugify(title) or FALLBACK_SLUG
    slug = base
    counter = 1

    while is_taken(slug):
        slug = f"{base}-{counter}"
        counter += 1

    return slug
