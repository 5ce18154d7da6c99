import logging
import time

from flask import g, request


logger = logging.getLogger("blog_api.requests")


def configure_logging(level: str):
    logging.basicConfig(
        level=level,
        format="[%(asctime)s] [%(levelname)s] %(name)s: %(message)s",
    )


def register_request_logging(app):
    @app.before_request
    def _log_request_start():
        g.request_started_at = time.perf_counter()
        logger.info("%s %s - %s", request.method, request.path, request.remote_addr)

    @app.after_request
    def _log_request_end(response):
        started = g.pop("request_started_at", None)
        if started is not None:
            logger.info(
                "%s %s - %s - %dms",
                request.method,
                request.path,
                response.status_code,
                (time.perf_counter() - started) * 1000,
            )
        return response
