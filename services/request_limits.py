"""Request body size guard applied before routing."""

from fastapi import HTTPException
from fastapi.responses import JSONResponse
from starlette.datastructures import Headers
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from config import get_config
from services.logging_utils import get_logger

logger = get_logger(__name__)

TOO_LARGE_DETAIL = "Payload too large"


class BodySizeLimitMiddleware:
    """Reject bodies above ``MAX_BODY_BYTES`` with a 413.

    A declared ``Content-Length`` is checked up front. Bodies without one
    (chunked uploads) are counted as they are received, and reading stops
    with a 413 as soon as the running total passes the limit.
    """

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        limit = get_config().MAX_BODY_BYTES
        content_length = Headers(scope=scope).get("content-length", "")
        if content_length.isdigit() and int(content_length) > limit:
            logger.warning(f"Rejected {content_length} byte body on {scope.get('path')}")
            response = JSONResponse(status_code=413, content={"detail": TOO_LARGE_DETAIL})
            await response(scope, receive, send)
            return

        received = 0

        async def limited_receive() -> Message:
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > limit:
                    logger.warning(f"Rejected streamed body over {limit} bytes on {scope.get('path')}")
                    raise HTTPException(status_code=413, detail=TOO_LARGE_DETAIL)
            return message

        await self.app(scope, limited_receive, send)


__all__ = ["BodySizeLimitMiddleware", "TOO_LARGE_DETAIL"]
