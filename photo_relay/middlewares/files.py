"""OpenAPI patching for multipart/form-data upload endpoints."""

import orjson
from robyn import Response

from photo_relay.core.logger import LogIcon, logger
from photo_relay.core.router import MULTIPART_ENDPOINTS
from photo_relay.middlewares.base import BaseMiddleware

MULTIPART_REQUEST_BODY = {
    "content": {
        "multipart/form-data": {
            "schema": {
                "type": "object",
                "properties": {
                    "file": {
                        "type": "string",
                        "format": "binary",
                        "description": "Image or video to upload",
                    },
                    "userId": {
                        "type": "string",
                        "description": "Owner of the upload, defaults to default-user",
                    },
                },
                "required": ["file"],
            }
        }
    },
    "required": True,
}


def patch_openapi_spec(spec: dict, endpoints: set[str]) -> dict:
    """Declare a multipart request body on every method of the given paths."""
    paths = spec.get("paths", {})
    for endpoint in endpoints:
        for operation in paths.get(endpoint, {}).values():
            if isinstance(operation, dict):
                operation["requestBody"] = MULTIPART_REQUEST_BODY
    return spec


class MultipartOpenAPIMiddleware(BaseMiddleware):
    """Patches the OpenAPI document so upload endpoints advertise multipart/form-data."""

    endpoints = frozenset(["/openapi.json"])

    def after(self, response: Response) -> Response:
        if not MULTIPART_ENDPOINTS:
            return response

        try:
            spec = orjson.loads(response.description)
        except orjson.JSONDecodeError as ex:
            logger.warning("OpenAPI document is not valid JSON", icon=LogIcon.WARNING, error=str(ex))
            return response

        response.description = orjson.dumps(patch_openapi_spec(spec, MULTIPART_ENDPOINTS)).decode()
        return response
