from flask import Blueprint, request

from blog_api.guards.auth_guard import auth_required, get_acting_user, optional_auth
from blog_api.responses import success_response
from blog_api.services import like_service
from blog_api.utils.pagination import read_pagination


like_bp = Blueprint("likes", __name__)

MAX_LIKERS_PER_PAGE = 100


@like_bp.route("/post/<id:post_id>/count", methods=["GET"])
def like_count(post_id):
    return success_response(like_service.get_like_count(post_id))


@like_bp.route("/post/<id:post_id>/users", methods=["GET"])
def likers(post_id):
    page, limit = read_pagination(request.args, default_limit=20, max_limit=MAX_LIKERS_PER_PAGE)
    return success_response(like_service.get_likers(post_id, page, limit))


@like_bp.route("/post/<id:post_id>/check", methods=["GET"])
@optional_auth
def check_like(post_id):
    return success_response(like_service.check_like(get_acting_user(), post_id))


@like_bp.route("/post/<id:post_id>/toggle", methods=["POST"])
@auth_required
def toggle_like(post_id):
    result = like_service.toggle_like(get_acting_user(), post_id)
    return success_response(result, f"Post {result['action']} successfully")


@like_bp.route("/trending", methods=["GET"])
def trending():
    _, limit = read_pagination(request.args)
    return success_response(
        like_service.get_trending_posts(request.args.get("timeframe"), limit)
    )


@like_bp.route("/user/liked-posts", methods=["GET"])
@auth_required
def liked_posts():
    page, limit = read_pagination(request.args)
    return success_response(like_service.get_liked_posts(get_acting_user(), page, limit))


@like_bp.route("/user/stats", methods=["GET"])
@auth_required
def like_stats():
    return success_response(like_service.get_user_like_stats(get_acting_user()))
