import urllib3
from threading import Lock

from minio import Minio


_minio_client = None
_minio_signature = None
_minio_lock = Lock()


def _build_signature(settings):
    return (
        settings.minio_endpoint,
        settings.minio_access_key,
        settings.minio_secret_key,
        settings.minio_secure,
        settings.minio_connect_timeout,
        settings.minio_read_timeout,
        settings.minio_http_pool_maxsize,
    )


def get_minio_client(settings):
    global _minio_client, _minio_signature

    signature = _build_signature(settings)
    with _minio_lock:
        if _minio_client is not None and _minio_signature == signature:
            return _minio_client

        timeout = urllib3.Timeout(
            connect=settings.minio_connect_timeout,
            read=settings.minio_read_timeout,
        )
        http_client = urllib3.PoolManager(
            timeout=timeout,
            retries=False,
            maxsize=settings.minio_http_pool_maxsize,
        )

        _minio_client = Minio(
            settings.minio_endpoint,
            access_key=settings.minio_access_key,
            secret_key=settings.minio_secret_key,
            secure=settings.minio_secure,
            http_client=http_client,
        )
        _minio_signature = signature
        return _minio_client
