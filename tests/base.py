import os
import shutil
import tempfile
import unittest
from datetime import timedelta

from flask_jwt_extended import create_access_token


TEST_JWT_SECRET = "test-secret-key-that-is-long-enough-for-hs256"


class ApiTestCase(unittest.TestCase):
    """Fresh sqlite file and upload folder per test class; tables reset per test."""

    extra_config = {}

    @classmethod
    def setUpClass(cls):
        db_fd, cls.db_path = tempfile.mkstemp(suffix=".db")
        os.close(db_fd)
        cls.upload_dir = tempfile.mkdtemp(prefix="blog-uploads-")

        from blog_api import create_app
        from blog_api.db import db
        from blog_api.repositories import user_repository

        config = {
            "TESTING": True,
            "SQLALCHEMY_DATABASE_URI": f"sqlite:///{cls.db_path}",
            "JWT_SECRET_KEY": TEST_JWT_SECRET,
            "UPLOAD_FOLDER": cls.upload_dir,
            "APP_PUBLIC_BASE_URL": "http://testserver",
            "MINIO_ACCESS_KEY": "",
            "MINIO_SECRET_KEY": "",
            "LOG_LEVEL": "WARNING",
            "APP_ENV": "testing",
            "CORS_ALLOWED_ORIGINS": ["http://localhost:3000"],
        }
        config.update(cls.extra_config)

        cls.app = create_app(config)
        cls.client = cls.app.test_client()
        cls.db = db
        cls.user_repository = user_repository

    @classmethod
    def tearDownClass(cls):
        with cls.app.app_context():
            cls.db.engine.dispose()
        if os.path.exists(cls.db_path):
            os.remove(cls.db_path)
        shutil.rmtree(cls.upload_dir, ignore_errors=True)

    def setUp(self):
        with self.app.app_context():
            self.db.drop_all()
            self.db.create_all()
        for name in os.listdir(self.upload_dir):
            os.remove(os.path.join(self.upload_dir, name))

    def _register(self, name="Alice", email="alice@example.com", password="pass123"):
        response = self.client.post(
            "/api/auth/register",
            json={"name": name, "email": email, "password": password},
        )
        self.assertEqual(response.status_code, 201, response.get_json())
        data = response.get_json()["data"]
        return data["user"], {"Authorization": f"Bearer {data['token']}"}

    def _expired_header(self, email):
        with self.app.app_context():
            user = self.user_repository.get_by_email(email)
            token = create_access_token(identity=user, expires_delta=timedelta(seconds=-1))
        return {"Authorization": f"Bearer {token}"}

    def _create_post(self, headers, title="Hello, World!", body="Some body text here", **extra):
        payload = {"title": title, "body": body, "published": True}
        payload.update(extra)
        response = self.client.post("/api/posts", json=payload, headers=headers)
        self.assertEqual(response.status_code, 201, response.get_json())
        return response.get_json()["data"]["post"]
