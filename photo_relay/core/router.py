"""Router with multipart form decoding, error mapping and response handling."""

import inspect
from collections.abc import Callable
from functools import wraps
from typing import Any
from uuid import uuid4

import orjson
from asgi_correlation_id import correlation_id
from pydantic import BaseModel
from robyn import Request, Response, SubRouter, status_codes
from robyn.robyn import HttpMethod

from photo_relay.core.errors import UnexpectedFailure, UploadError
from photo_relay.core.logger import LogIcon, logger
from photo_relay.models.core import ParsedForm
from photo_relay.services.multipart import decode_multipart
from photo_relay.services.responses import error_response

MULTIPART_ENDPOINTS: set[str] = set()


def parse_endpoint_signature(sig: inspect.Signature) -> set[str]:
    """Names of the parameters annotated as ParsedForm."""
    return {name for name, param in sig.parameters.items() if param.annotation is ParsedForm}


def bind_request_id(request: Request) -> str:
    """Use the caller's X-Request-ID when given, otherwise a fresh one."""
    request_id = request.headers.get("x-request-id") or uuid4().hex
    correlation_id.set(request_id)
    return request_id


def request_body_bytes(request: Request) -> bytes:
    """Raw request body; text bodies are re-encoded to the bytes they were decoded from."""
    body = request.body
    if isinstance(body, str):
        return body.encode("utf-8")
    return bytes(body or b"")


def parse_request_form(request: Request) -> ParsedForm:
    """Decode a multipart request into a ParsedForm. Raises MissingBoundary."""
    content_type = request.headers.get("content-type")
    logger.info("Multipart request received", icon=LogIcon.UPLOAD, content_type=content_type)
    form = decode_multipart(content_type, request_body_bytes(request))
    logger.info("Parsed form", icon=LogIcon.FILE, files=list(form.files), fields=list(form.fields))
    return form


def parse_response(result: Any) -> Response:
    """Convert handler result to Response."""
    match result:
        case Response():
            return result
        case BaseModel():
            return Response(
                status_code=status_codes.HTTP_200_OK,
                headers={"content-type": "application/json"},
                description=result.model_dump_json(by_alias=True, exclude_none=True),
            )
        case dict() | list():
            return Response(
                status_code=status_codes.HTTP_200_OK,
                headers={"content-type": "application/json"},
                description=orjson.dumps(result).decode(),
            )
        case _:
            return Response(
                status_code=status_codes.HTTP_200_OK,
                headers={},
                description=str(result),
            )


def wrap_handler(handler: Callable) -> Callable:
    """Wrap an async handler with form decoding and failure-to-response mapping."""
    sig = inspect.signature(handler)
    form_params = parse_endpoint_signature(sig)
    has_request_param = "request" in sig.parameters

    @wraps(handler)
    async def wrapped_handler(request: Request, **h_kwargs):
        bind_request_id(request)
        try:
            if form_params:
                form = parse_request_form(request)
                for param_name in form_params:
                    h_kwargs[param_name] = form

            # Pass request to handler only if it declared it
            if has_request_param:
                h_kwargs["request"] = request

            result = await handler(**h_kwargs)
        except UploadError as err:
            logger.warning("Request failed", icon=LogIcon.WARNING, code=err.code, status=err.status_code)
            return error_response(err)
        except Exception as ex:
            logger.exception("Unhandled error", icon=LogIcon.ERROR)
            return error_response(UnexpectedFailure(str(ex)))

        return parse_response(result)

    # Build signature: always include request for Robyn injection
    new_params = [inspect.Parameter("request", inspect.Parameter.POSITIONAL_OR_KEYWORD, annotation=Request)]
    for name, param in sig.parameters.items():
        if name == "request" or name in form_params:
            continue
        new_params.append(param)

    wrapped_handler.__signature__ = sig.replace(parameters=new_params)  # type: ignore[attr-defined]
    return wrapped_handler


HTTP_METHODS = (
    HttpMethod.GET,
    HttpMethod.POST,
    HttpMethod.PUT,
    HttpMethod.DELETE,
    HttpMethod.PATCH,
    HttpMethod.OPTIONS,
)


def _create_method_wrapper(original_method: Callable, router_prefix: str = "") -> Callable:
    @wraps(original_method)
    def method_wrapper(*args, **kwargs) -> Callable:
        endpoint = args[0] if args else kwargs.get("endpoint", "")
        decorator = original_method(*args, **kwargs)

        def handler_decorator(handler: Callable) -> Callable:
            wrapped_handler = wrap_handler(handler)
            if parse_endpoint_signature(inspect.signature(handler)):
                full_path = f"{router_prefix}{endpoint}".replace("//", "/")
                MULTIPART_ENDPOINTS.add(full_path)
            return decorator(wrapped_handler)

        return handler_decorator

    return method_wrapper


class Router(SubRouter):
    """SubRouter with multipart decoding and uniform error responses."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._prefix = kwargs.get("prefix", "")
        self._wrap_methods()

    def _wrap_methods(self) -> None:
        """Wrap HTTP methods with parsing logic."""
        for method in HTTP_METHODS:
            method_name = str(method).split(".")[-1].lower()
            if hasattr(self, method_name):
                original_method = getattr(self, method_name)
                wrapped_method = _create_method_wrapper(original_method, self._prefix)
                setattr(self, method_name, wrapped_method)
