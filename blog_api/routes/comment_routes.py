from flask import Blueprint, request

from blog_api.guards.auth_guard import auth_required, get_acting_user
from blog_api.guards.ownership_guard import owns
from blog_api.responses import success_response
from blog_api.routes import read_json_body
from blog_api.services import comment_service
from blog_api.utils.pagination import read_pagination


comment_bp = Blueprint("comments", __name__)

RECENT_DEFAULT_LIMIT = 5
MAX_COMMENTS_PER_PAGE = 100


@comment_bp.route("/recent", methods=["GET"])
def recent_comments():
    _, limit = read_pagination(request.args, default_limit=RECENT_DEFAULT_LIMIT)
    return success_response(comment_service.get_recent_comments(limit))


@comment_bp.route("/post/<id:post_id>", methods=["GET"])
def post_comments(post_id):
    page, limit = read_pagination(request.args, max_limit=MAX_COMMENTS_PER_PAGE)
    return success_response(comment_service.list_by_post(post_id, page, limit))


@comment_bp.route("/post/<id:post_id>", methods=["POST"])
@auth_required
def create_comment(post_id):
    result = comment_service.create_comment(get_acting_user(), post_id, read_json_body())
    return success_response(result, "Comment created successfully", 201)


@comment_bp.route("/user/my-comments", methods=["GET"])
@auth_required
def my_comments():
    page, limit = read_pagination(request.args)
    return success_response(comment_service.get_user_comments(get_acting_user(), page, limit))


@comment_bp.route("/<id:comment_id>", methods=["GET"])
def get_comment(comment_id):
    return success_response(comment_service.get_comment(comment_id))


@comment_bp.route("/<id:comment_id>", methods=["PUT"])
@auth_required
@owns("comment")
def update_comment(comment_id):
    result = comment_service.update_comment(comment_id, read_json_body())
    return success_response(result, "Comment updated successfully")


@comment_bp.route("/<id:comment_id>", methods=["DELETE"])
@auth_required
@owns("comment")
def delete_comment(comment_id):
    comment_service.delete_comment(comment_id)
    return success_response(message="Comment deleted successfully")
