import io
import shutil
import tempfile
import unittest
from datetime import timedelta

from sqlalchemy.exc import IntegrityError
from werkzeug.datastructures import FileStorage, MultiDict

from blog_api.config import Config, Settings, database_url, parse_duration
from blog_api.errors import ValidationError, classify_integrity_error
from blog_api.extensions.media_storage import LocalMediaStorage
from blog_api.services import upload_service
from blog_api.services.post_service import parse_id
from blog_api.utils.pagination import MAX_DB_INTEGER, page_offset, pagination_meta, read_pagination
from blog_api.utils.slugs import slugify, unique_slug


class FakeDriverError(Exception):
    def __init__(self, message, pgcode=None):
        super().__init__(message)
        self.pgcode = pgcode


class TestSlugs(unittest.TestCase):
    def test_slugify(self):
        self.assertEqual(slugify("Hello, World!"), "hello-world")
        self.assertEqual(slugify("  Multiple   spaces -- and dashes  "), "multiple-spaces-and-dashes")
        self.assertEqual(slugify("Ünïcode & symbols!!"), "ncode-symbols")
        self.assertEqual(slugify("!!!"), "")

    def test_slugify_is_idempotent(self):
        titles = [
            "Hello, World!",
            "-leading and trailing-",
            "Tabs\tand\nnewlines",
            "already-a-slug",
            "123 Numbers 456",
            "---",
            "",
        ]
        for title in titles:
            with self.subTest(title=title):
                once = slugify(title)
                self.assertEqual(slugify(once), once)

    def test_unique_slug_appends_counter(self):
        taken = {"my-title", "my-title-1"}
        self.assertEqual(unique_slug("My Title", taken.__contains__), "my-title-2")
        self.assertEqual(unique_slug("Fresh", taken.__contains__), "fresh")

    def test_unique_slug_falls_back_for_empty_titles(self):
        self.assertEqual(unique_slug("???", lambda slug: False), "post")
        self.assertEqual(unique_slug("???", {"post"}.__contains__), "post-1")


class TestPagination(unittest.TestCase):
    def test_read_pagination_defaults_and_clamps(self):
        self.assertEqual(read_pagination(MultiDict()), (1, 10))
        self.assertEqual(read_pagination(MultiDict({"page": "-3", "limit": "0"})), (1, 1))
        self.assertEqual(read_pagination(MultiDict({"page": "3", "limit": "999"})), (3, 50))
        self.assertEqual(read_pagination(MultiDict({"page": "x", "limit": "y"})), (1, 10))
        self.assertEqual(read_pagination(MultiDict({"limit": "80"}), max_limit=100), (1, 80))

    def test_read_pagination_keeps_offset_in_database_range(self):
        page, limit = read_pagination(MultiDict({"page": "99999999999999999999", "limit": "10"}))
        self.assertEqual(limit, 10)
        self.assertLessEqual(page_offset(page, limit), MAX_DB_INTEGER)
        self.assertGreater(page, 1)

    def test_page_offset(self):
        self.assertEqual(page_offset(1, 10), 0)
        self.assertEqual(page_offset(3, 20), 40)

    def test_pagination_meta(self):
        self.assertEqual(pagination_meta(2, 10, 5)["pages"], 1)
        self.assertEqual(pagination_meta(1, 10, 0)["pages"], 0)
        self.assertEqual(pagination_meta(1, 10, 21)["pages"], 3)


class TestConfigHelpers(unittest.TestCase):
    def test_parse_duration(self):
        self.assertEqual(parse_duration("7d"), timedelta(days=7))
        self.assertEqual(parse_duration("12h"), timedelta(hours=12))
        self.assertEqual(parse_duration("30m"), timedelta(minutes=30))
        self.assertEqual(parse_duration("90"), timedelta(seconds=90))

    def test_parse_duration_rejects_garbage(self):
        with self.assertRaises(ValueError):
            parse_duration("soon")

    def test_database_url_selects_psycopg_driver(self):
        self.assertEqual(
            database_url("postgres://u:p@db:5432/blog"),
            "postgresql+psycopg://u:p@db:5432/blog",
        )
        self.assertEqual(database_url("sqlite:///blog.db"), "sqlite:///blog.db")


class TestIntegrityClassification(unittest.TestCase):
    def _error(self, message, pgcode=None):
        return IntegrityError("INSERT ...", {}, FakeDriverError(message, pgcode))

    def test_unique_violation(self):
        self.assertEqual(
            classify_integrity_error(self._error("duplicate key", "23505")),
            (409, "Resource already exists"),
        )
        self.assertEqual(
            classify_integrity_error(self._error("UNIQUE constraint failed: likes.post_id")),
            (409, "Resource already exists"),
        )

    def test_foreign_key_violation(self):
        self.assertEqual(
            classify_integrity_error(self._error("insert violates fk", "23503")),
            (400, "Invalid reference to related resource"),
        )
        self.assertEqual(
            classify_integrity_error(self._error("FOREIGN KEY constraint failed")),
            (400, "Invalid reference to related resource"),
        )

    def test_other_violation(self):
        self.assertEqual(
            classify_integrity_error(self._error("NOT NULL constraint failed: posts.title")),
            (400, "Invalid input data"),
        )


class TestIdParsing(unittest.TestCase):
    def test_parse_id(self):
        self.assertEqual(parse_id("42"), 42)
        self.assertEqual(parse_id(str(MAX_DB_INTEGER)), MAX_DB_INTEGER)
        for value in ("²", "٣", "4a", "-1", " 7", "", str(MAX_DB_INTEGER + 1), None):
            with self.subTest(value=value):
                self.assertIsNone(parse_id(value))


def _settings(upload_folder, **overrides):
    config = {key: getattr(Config, key) for key in dir(Config) if key.isupper()}
    config["UPLOAD_FOLDER"] = upload_folder
    config.update(overrides)
    return Settings.from_mapping(config)


def _file(name="pic.png", mimetype="image/png", data=b"png-bytes"):
    return FileStorage(stream=io.BytesIO(data), filename=name, content_type=mimetype)


class TestUploadService(unittest.TestCase):
    """Runs without an app: settings and storage are handed in."""

    def setUp(self):
        self.upload_dir = tempfile.mkdtemp(prefix="blog-upload-unit-")
        self.settings = _settings(self.upload_dir, MAX_FILE_SIZE=16, MAX_UPLOAD_FILES=2)
        self.storage = LocalMediaStorage(self.upload_dir, "http://cdn.test")

    def tearDown(self):
        shutil.rmtree(self.upload_dir, ignore_errors=True)

    def test_upload_config_uses_given_settings(self):
        config = upload_service.upload_config(self.settings, self.storage)
        self.assertEqual(config["maxFileSize"], 16)
        self.assertEqual(config["maxFiles"], 2)
        self.assertEqual(config["provider"], "local")

    def test_store_image_respects_given_limits(self):
        stored = upload_service.store_image(self.settings, self.storage, _file())
        self.assertTrue(stored["image"]["url"].startswith("http://cdn.test/uploads/image-"))

        with self.assertRaises(ValidationError):
            upload_service.store_image(self.settings, self.storage, _file(data=b"x" * 17))
        with self.assertRaises(ValidationError):
            upload_service.store_images(self.settings, self.storage, [_file(), _file(), _file()])

    def test_delete_image_uses_given_storage(self):
        stored = upload_service.store_image(self.settings, self.storage, _file())["image"]
        upload_service.delete_image(self.storage, stored["url"])
        with self.assertRaises(ValidationError):
            upload_service.delete_image(self.storage, "http://elsewhere/uploads/x.png")
