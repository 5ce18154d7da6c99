import math


DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10

# Largest value a signed 64-bit INTEGER column or OFFSET accepts.
MAX_DB_INTEGER = 2**63 - 1


def read_pagination(args, default_limit: int = DEFAULT_LIMIT, max_limit: int = 50):
    """Return ``(page, limit)`` from query args, floored at 1 and clamped to ``max_limit``.

    ``page`` is also capped so its offset still fits the database integer range;
    such a page lies past the last row and simply comes back empty.
    """
    page = args.get("page", default=DEFAULT_PAGE, type=int)
    limit = args.get("limit", default=default_limit, type=int)

    limit = min(max_limit, max(1, limit))
    page = min(max(1, page), MAX_DB_INTEGER // limit + 1)
    return page, limit


def page_offset(page: int, limit: int) -> int:
    return (page - 1) * limit


def pagination_meta(page: int, limit: int, total: int) -> dict:
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "pages": math.ceil(total / limit),
    }
