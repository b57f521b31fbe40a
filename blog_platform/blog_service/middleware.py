"""
Request body size limit.

The declared Content-Length is checked up front; chunked bodies are counted
as they are received, so the limit holds either way.
"""
from fastapi import HTTPException, status
from starlette.types import ASGIApp, Message, Receive, Scope, Send
import logging

from .utils.responses import failure_response

logger = logging.getLogger(__name__)

TOO_LARGE_MESSAGE = "PayloadTooLargeError : request entity too large"


class PayloadTooLargeError(HTTPException):
    """Raised from inside body reading once the limit is crossed."""

    def __init__(self):
        super().__init__(status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail=TOO_LARGE_MESSAGE)


class BodyLimitMiddleware:
    def __init__(self, app: ASGIApp, max_body_bytes: int):
        self.app = app
        self.max_body_bytes = max_body_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        content_length = dict(scope.get("headers") or []).get(b"content-length", b"")
        if content_length.isdigit() and int(content_length) > self.max_body_bytes:
            logger.warning(
                "Rejected %s %s: declared body of %s bytes exceeds %s",
                scope.get("method"), scope.get("path"), int(content_length), self.max_body_bytes
            )
            response = failure_response(TOO_LARGE_MESSAGE, status.HTTP_413_REQUEST_ENTITY_TOO_LARGE)
            await response(scope, receive, send)
            return

        received = 0

        async def limited_receive() -> Message:
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > self.max_body_bytes:
                    logger.warning(
                        "Rejected %s %s: streamed body exceeds %s bytes",
                        scope.get("method"), scope.get("path"), self.max_body_bytes
                    )
                    # FastAPI re-raises HTTPException from body parsing, so
                    # this reaches the app's exception handler
                    raise PayloadTooLargeError()
            return message

        await self.app(scope, limited_receive, send)
