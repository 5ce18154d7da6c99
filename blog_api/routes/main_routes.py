from datetime import datetime, timezone

from flask import Blueprint, send_from_directory

from blog_api.extensions.extensions import get_settings
from blog_api.responses import success_response


main_bp = Blueprint("main", __name__)


@main_bp.route("/health", methods=["GET"])
def health():
    return success_response(
        {
            "status": "ok",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "environment": get_settings().app_env,
        },
        "Server is healthy",
    )


@main_bp.route("/api", methods=["GET"])
def api_index():
    return success_response(
        {
            "endpoints": {
                "auth": "/api/auth",
                "posts": "/api/posts",
                "comments": "/api/comments",
                "likes": "/api/likes",
                "uploads": "/api/uploads",
            },
        },
        "Blog API",
    )


@main_bp.route("/uploads/<path:filename>", methods=["GET"])
def uploaded_file(filename: str):
    return send_from_directory(get_settings().upload_folder, filename)
