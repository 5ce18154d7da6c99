import logging

from blog_api.errors import ValidationError
from blog_api.extensions.media_storage import stream_and_length


logger = logging.getLogger(__name__)

BYTES_PER_MB = 1024 * 1024


def _size_in_mb(size: int) -> float:
    return round(size / BYTES_PER_MB, 2)


def validate_image(file_storage, settings):
    """Reject missing, disallowed or oversized files before anything is stored."""
    if file_storage is None or not file_storage.filename:
        raise ValidationError("No image file provided")

    mimetype = (file_storage.mimetype or "").lower()
    if mimetype not in settings.allowed_image_types:
        raise ValidationError(
            "Invalid file type. Allowed types: " + ", ".join(settings.allowed_image_types)
        )

    _, length = stream_and_length(file_storage)
    if length > settings.max_file_size:
        raise ValidationError(
            f"File too large. Maximum size is {_size_in_mb(settings.max_file_size)}MB"
        )
    return mimetype


def _stored_payload(stored, file_storage):
    return {
        "url": stored.url,
        "identifier": stored.identifier,
        "provider": stored.provider,
        "original_name": file_storage.filename,
    }


def store_image(settings, storage, file_storage):
    mimetype = validate_image(file_storage, settings)

    stored = storage.save(file_storage, mimetype)
    logger.info("Image uploaded: %s (%s)", stored.identifier, stored.provider)
    return {"image": _stored_payload(stored, file_storage)}


def store_images(settings, storage, files):
    files = [f for f in files if f is not None and f.filename]
    if not files:
        raise ValidationError("No image files provided")
    if len(files) > settings.max_upload_files:
        raise ValidationError(f"Maximum {settings.max_upload_files} files allowed")

    mimetypes = [validate_image(f, settings) for f in files]

    images = []
    for file_storage, mimetype in zip(files, mimetypes):
        stored = storage.save(file_storage, mimetype)
        images.append(_stored_payload(stored, file_storage))

    logger.info("%s images uploaded", len(images))
    return {"images": images, "count": len(images)}


def delete_image(storage, image_url):
    """Remove a stored image by its public URL.

    Deletion is best effort: once the URL is accepted, a backend failure is
    logged and the call still succeeds.
    """
    if not isinstance(image_url, str) or not image_url.strip():
        raise ValidationError("Image URL is required")

    identifier = storage.identifier_from_url(image_url.strip())
    if identifier is None:
        raise ValidationError("Invalid image URL")

    try:
        storage.delete(identifier)
    except Exception:
        logger.exception("Failed to delete image %s from %s storage", identifier, storage.provider)


def upload_config(settings, storage):
    return {
        "maxFileSize": settings.max_file_size,
        "maxFileSizeMB": _size_in_mb(settings.max_file_size),
        "allowedTypes": list(settings.allowed_image_types),
        "maxFiles": settings.max_upload_files,
        "provider": storage.provider,
    }
