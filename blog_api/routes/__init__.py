from flask import request
from werkzeug.routing import IntegerConverter

from blog_api.errors import ValidationError
from blog_api.utils.pagination import MAX_DB_INTEGER


class IdConverter(IntegerConverter):
    """``<id:...>``: a non-negative integer that fits a database id column.

    Larger values do not match the rule and end as the route-not-found 404.
    """

    def __init__(self, map, max=MAX_DB_INTEGER):
        super().__init__(map, max=max)


def read_json_body() -> dict:
    """Parsed JSON object of the request; an absent body reads as empty."""
    if not request.get_data(cache=True):
        return {}

    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Invalid JSON body")
    return data
