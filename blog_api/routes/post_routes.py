from flask import Blueprint, request

from blog_api.guards.auth_guard import auth_required, get_acting_user, optional_auth
from blog_api.guards.ownership_guard import owns
from blog_api.responses import success_response
from blog_api.routes import read_json_body
from blog_api.services import post_service
from blog_api.utils.pagination import read_pagination


post_bp = Blueprint("posts", __name__)

MAX_TRENDING_LIMIT = 50


@post_bp.route("", methods=["GET"])
def list_posts():
    page, limit = read_pagination(request.args)
    result = post_service.list_posts(
        page,
        limit,
        tags=request.args.get("tags"),
        author=request.args.get("author"),
        search=request.args.get("search"),
        sort=request.args.get("sort", post_service.SORT_LATEST),
    )
    return success_response(result)


@post_bp.route("/trending", methods=["GET"])
def trending_posts():
    _, limit = read_pagination(request.args, max_limit=MAX_TRENDING_LIMIT)
    result = post_service.get_trending(request.args.get("timeframe"), limit)
    return success_response(result)


@post_bp.route("/user/my-posts", methods=["GET"])
@auth_required
def my_posts():
    page, limit = read_pagination(request.args)
    return success_response(post_service.get_user_posts(get_acting_user(), page, limit))


@post_bp.route("/<identifier>", methods=["GET"])
@optional_auth
def get_post(identifier):
    return success_response(post_service.get_post(identifier, get_acting_user()))


@post_bp.route("", methods=["POST"])
@auth_required
def create_post():
    result = post_service.create_post(get_acting_user(), read_json_body())
    return success_response(result, "Post created successfully", 201)


@post_bp.route("/<id:post_id>", methods=["PUT"])
@auth_required
@owns("post")
def update_post(post_id):
    result = post_service.update_post(post_id, read_json_body())
    return success_response(result, "Post updated successfully")


@post_bp.route("/<id:post_id>", methods=["DELETE"])
@auth_required
@owns("post")
def delete_post(post_id):
    post_service.delete_post(post_id)
    return success_response(message="Post deleted successfully")


@post_bp.route("/<id:post_id>/publish", methods=["PATCH"])
@auth_required
@owns("post")
def toggle_publish(post_id):
    message, result = post_service.toggle_publish(post_id)
    return success_response(result, message)


@post_bp.route("/<id:post_id>/stats", methods=["GET"])
@auth_required
@owns("post")
def post_stats(post_id):
    return success_response(post_service.get_post_stats(post_id))
