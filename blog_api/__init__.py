import logging

from flask import Flask

from blog_api.config import Config, Settings
from blog_api.db import init_db
from blog_api.errors import register_error_handlers
from blog_api.extensions.extensions import cors, jwt_manager, ma
from blog_api.extensions.media_storage import build_media_storage
from blog_api.extensions.request_log import configure_logging, register_request_logging


logger = logging.getLogger(__name__)


def create_app(test_config=None):
    app = Flask(__name__)
    app.config.from_object(Config)
    if test_config:
        app.config.update(test_config)

    configure_logging(app.config["LOG_LEVEL"])

    settings = Settings.from_mapping(app.config)
    app.extensions["settings"] = settings
    app.extensions["media_storage"] = build_media_storage(settings)

    init_db(app)
    ma.init_app(app)

    # Registers the token callbacks on jwt_manager.
    from blog_api.guards import auth_guard  # noqa: F401
    jwt_manager.init_app(app)

    cors.init_app(
        app,
        origins=app.config["CORS_ALLOWED_ORIGINS"],
        supports_credentials=True,
        methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
    )

    register_request_logging(app)
    register_error_handlers(app, settings)

    from blog_api.routes import IdConverter
    from blog_api.routes.auth_routes import auth_bp
    from blog_api.routes.comment_routes import comment_bp
    from blog_api.routes.like_routes import like_bp
    from blog_api.routes.main_routes import main_bp
    from blog_api.routes.post_routes import post_bp
    from blog_api.routes.upload_routes import upload_bp

    # Must be in the map before the blueprints add their rules.
    app.url_map.converters["id"] = IdConverter

    app.register_blueprint(main_bp)
    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(post_bp, url_prefix="/api/posts")
    app.register_blueprint(comment_bp, url_prefix="/api/comments")
    app.register_blueprint(like_bp, url_prefix="/api/likes")
    app.register_blueprint(upload_bp, url_prefix="/api/uploads")

    logger.info("Blog API initialized (%s)", settings.app_env)
    return app
