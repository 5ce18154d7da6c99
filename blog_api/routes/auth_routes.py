from flask import Blueprint

from blog_api.guards.auth_guard import auth_required, get_acting_user
from blog_api.responses import success_response
from blog_api.routes import read_json_body
from blog_api.services import auth_service


auth_bp = Blueprint("auth", __name__)


@auth_bp.route("/register", methods=["POST"])
def register():
    data = read_json_body()
    result = auth_service.register(
        data.get("name"),
        data.get("email"),
        data.get("password"),
    )
    return success_response(result, "User registered successfully", 201)


@auth_bp.route("/login", methods=["POST"])
def login():
    data = read_json_body()
    result = auth_service.login(data.get("email"), data.get("password"))
    return success_response(result, "Login successful")


@auth_bp.route("/user/<id:user_id>", methods=["GET"])
def public_profile(user_id):
    return success_response(auth_service.get_public_profile(user_id))


@auth_bp.route("/profile", methods=["GET"])
@auth_required
def get_profile():
    return success_response(auth_service.get_profile(get_acting_user()))


@auth_bp.route("/profile", methods=["PUT"])
@auth_required
def update_profile():
    result = auth_service.update_profile(get_acting_user(), read_json_body())
    return success_response(result, "Profile updated successfully")


@auth_bp.route("/change-password", methods=["PUT"])
@auth_required
def change_password():
    data = read_json_body()
    auth_service.change_password(
        get_acting_user(),
        data.get("currentPassword", data.get("current_password")),
        data.get("newPassword", data.get("new_password")),
    )
    return success_response(message="Password changed successfully")


@auth_bp.route("/account", methods=["DELETE"])
@auth_required
def delete_account():
    data = read_json_body()
    auth_service.delete_account(get_acting_user(), data.get("password"))
    return success_response(message="Account deleted successfully")
