# survival/logging_middleware.py
from datetime import datetime
from http import HTTPStatus
import logging

from fastapi import FastAPI, Request
from fastapi.responses import Response

from .config import Settings

logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now().strftime("%Y-%m-%d %H:%M:%S.%f")


def _reason(code: int) -> str:
    try:
        return HTTPStatus(code).phrase
    except ValueError:
        return "Unknown"


def install_request_logging(app: FastAPI, settings: Settings) -> None:
    """
    リクエスト／レスポンスを 1 行ずつ INFO で出す。
    クエリ・ボディを出すかどうかは Settings で切り替える。
    """

    @app.middleware("http")
    async def _log_requests(request: Request, call_next):
        time = _now()
        path = request.url.path

        logger.info("[%s] REQUEST %s %s", time, request.method, path)

        if settings.log_request_query and request.url.query:
            logger.info("[%s] ?%s", time, request.url.query)

        if settings.log_request_body:
            body = await request.body()
            if body:
                logger.info("[%s] %s", time, body.decode("utf-8", errors="replace"))

        response = await call_next(request)

        if not settings.log_response_body:
            logger.info(
                "[%s] RESPONSE %s %s %s",
                _now(), response.status_code, _reason(response.status_code), path,
            )
            return response

        # ボディを読むとストリームが消費されるので、読み切ってから作り直す
        content = b"".join([chunk async for chunk in response.body_iterator])
        logger.info(
            "[%s] RESPONSE %s %s %s",
            _now(), response.status_code, _reason(response.status_code), path,
        )
        if content:
            logger.info("[%s] %s", _now(), content.decode("utf-8", errors="replace"))

        return Response(
            content=content,
            status_code=response.status_code,
            headers=dict(response.headers),
            media_type=response.media_type,
        )
