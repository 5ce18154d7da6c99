from flask import current_app
from flask_cors import CORS
from flask_jwt_extended import JWTManager
from flask_marshmallow import Marshmallow


ma = Marshmallow()
jwt_manager = JWTManager()
cors = CORS()


def get_settings():
    return current_app.extensions["settings"]


def get_media_storage():
    return current_app.extensions["media_storage"]
