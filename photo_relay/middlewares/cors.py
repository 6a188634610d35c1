"""CORS headers for browser callers of the upload and listing endpoints."""

from robyn import Response

from photo_relay.middlewares.base import BaseMiddleware


class CorsMiddleware(BaseMiddleware):
    """Adds permissive CORS headers to every response on its endpoints."""

    def __init__(
        self,
        endpoints: frozenset[str] | list[str] | None = None,
        allow_origin: str = "*",
        allow_methods: str = "POST, OPTIONS",
        allow_headers: str = "Content-Type",
    ) -> None:
        super().__init__(endpoints)
        self.headers = {
            "Access-Control-Allow-Origin": allow_origin,
            "Access-Control-Allow-Methods": allow_methods,
            "Access-Control-Allow-Headers": allow_headers,
        }

    def after(self, response: Response) -> Response:
        for name, value in self.headers.items():
            response.headers.set(name, value)
        return response
