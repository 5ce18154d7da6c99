from flask import Blueprint, request

from blog_api.extensions.extensions import get_media_storage, get_settings
from blog_api.guards.auth_guard import auth_required
from blog_api.responses import success_response
from blog_api.routes import read_json_body
from blog_api.services import upload_service


upload_bp = Blueprint("uploads", __name__)


@upload_bp.route("/config", methods=["GET"])
def upload_config():
    return success_response(upload_service.upload_config(get_settings(), get_media_storage()))


@upload_bp.route("/image", methods=["POST"])
@auth_required
def upload_image():
    result = upload_service.store_image(
        get_settings(),
        get_media_storage(),
        request.files.get("image"),
    )
    return success_response(result, "Image uploaded successfully", 201)


@upload_bp.route("/images", methods=["POST"])
@auth_required
def upload_images():
    result = upload_service.store_images(
        get_settings(),
        get_media_storage(),
        request.files.getlist("images"),
    )
    return success_response(result, f"{result['count']} images uploaded successfully", 201)


@upload_bp.route("/image", methods=["DELETE"])
@auth_required
def delete_image():
    data = read_json_body()
    upload_service.delete_image(get_media_storage(), data.get("imageUrl", data.get("image_url")))
    return success_response(message="Image deleted successfully")
