import logging

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

logger = logging.getLogger(__name__)

# Room for the multipart boundary and part headers around the file itself.
MULTIPART_OVERHEAD = 64 * 1024


class UploadSizeLimitMiddleware(BaseHTTPMiddleware):
    """Reject clearly oversized upload bodies before the multipart form is parsed.

    The exact file size is checked by the upload handler once the file is read.
    """

    def __init__(self, app, max_bytes: int, path: str = "/upload") -> None:
        super().__init__(app)
        self.max_bytes = max_bytes
        self.path = path

    async def dispatch(self, request: Request, call_next):
        if request.method == "POST" and request.url.path == self.path:
            content_length = request.headers.get("content-length")
            if (
                content_length
                and content_length.isdigit()
                and int(content_length) > self.max_bytes + MULTIPART_OVERHEAD
            ):
                logger.info("Rejected upload of %s bytes (limit %d)", content_length, self.max_bytes)
                return JSONResponse(
                    status_code=413,
                    content={"error": "File too large", "limit": self.max_bytes},
                )
        return await call_next(request)
