import logging
import os
import uuid
from typing import NamedTuple

from werkzeug.utils import secure_filename

from blog_api.errors import MediaStorageError
from blog_api.extensions.minio_client import get_minio_client


logger = logging.getLogger(__name__)


class StoredMedia(NamedTuple):
    url: str
    identifier: str
    provider: str


def extension_for_mimetype(mimetype: str) -> str:
    mapping = {
        "image/jpeg": "jpeg",
        "image/png": "png",
        "image/webp": "webp",
        "image/gif": "gif",
    }
    return mapping.get(mimetype, mimetype.split("/")[-1])


def stream_and_length(file_storage):
    stream = getattr(file_storage, "stream", file_storage)
    try:
        stream.seek(0, 2)
        length = stream.tell()
        stream.seek(0)
        return stream, length
    except (AttributeError, OSError):
        return stream, -1


class LocalMediaStorage:
    provider = "local"

    def __init__(self, upload_folder: str, public_base_url: str = ""):
        self.upload_folder = upload_folder
        self.public_base_url = public_base_url.rstrip("/")
        os.makedirs(self.upload_folder, exist_ok=True)

    def _url_for(self, filename: str) -> str:
        return f"{self.public_base_url}/uploads/{filename}"

    def save(self, file_storage, mimetype: str) -> StoredMedia:
        filename = f"image-{uuid.uuid4().hex}.{extension_for_mimetype(mimetype)}"
        # Rewinds the stream after the size probe done during validation.
        stream_and_length(file_storage)

        file_storage.save(os.path.join(self.upload_folder, filename))
        logger.info("Image saved locally: %s", filename)
        return StoredMedia(self._url_for(filename), filename, self.provider)

    def identifier_from_url(self, url: str) -> str | None:
        prefix = self._url_for("")
        if not url.startswith(prefix):
            return None
        filename = url[len(prefix):]
        if not filename or secure_filename(filename) != filename:
            return None
        return filename

    def delete(self, identifier: str):
        path = os.path.join(self.upload_folder, identifier)
        if os.path.exists(path):
            os.remove(path)
            logger.info("Local image deleted: %s", identifier)


class MinioMediaStorage:
    provider = "minio"

    def __init__(self, settings):
        self.settings = settings
        self.bucket = settings.minio_bucket
        self.public_prefix = f"{settings.minio_public_base_url}/{self.bucket}/"

    def _client(self):
        return get_minio_client(self.settings)

    def save(self, file_storage, mimetype: str) -> StoredMedia:
        object_name = f"images/{uuid.uuid4()}.{extension_for_mimetype(mimetype)}"
        stream, length = stream_and_length(file_storage)
        upload_kwargs = {
            "bucket_name": self.bucket,
            "object_name": object_name,
            "data": stream,
            "length": length,
            "content_type": mimetype,
        }
        if length == -1:
            upload_kwargs["part_size"] = 10 * 1024 * 1024

        try:
            minio = self._client()
            if not minio.bucket_exists(self.bucket):
                minio.make_bucket(self.bucket)
            minio.put_object(**upload_kwargs)
        except Exception as e:
            raise MediaStorageError("Media storage is unavailable") from e

        logger.info("Image uploaded to object storage: %s", object_name)
        return StoredMedia(self.public_prefix + object_name, object_name, self.provider)

    def identifier_from_url(self, url: str) -> str | None:
        if not url.startswith(self.public_prefix):
            return None
        object_name = url[len(self.public_prefix):]
        if not object_name or ".." in object_name.split("/"):
            return None
        return object_name

    def delete(self, identifier: str):
        self._client().remove_object(self.bucket, identifier)
        logger.info("Image deleted from object storage: %s", identifier)


def build_media_storage(settings):
    if settings.use_remote_storage:
        logger.info("Object storage credentials found, using bucket %s", settings.minio_bucket)
        return MinioMediaStorage(settings)

    logger.info("Object storage credentials not found, using local storage")
    return LocalMediaStorage(settings.upload_folder, settings.app_public_base_url)
