"""
Relay of image requests to imgproxy.

A request carries ``src`` (``<bucket>/<object>``), an optional pre-encoded
``params`` pipeline and an optional output ``format``. The handler validates
them, builds and signs the imgproxy path, issues the GET and streams the
response back with only the forward-listed headers. Invalid requests end with
a bodiless 400 before anything is sent to imgproxy; transport failures before
the response headers arrive end with a 500.
"""

import asyncio
import re
from typing import AsyncIterator, Dict, Mapping, Optional, Tuple, Union

import httpx
from fastapi.responses import Response, StreamingResponse
from opentelemetry import trace
from starlette.background import BackgroundTask

from imgproxy_bridge.errors import (
    BucketNotAllowedError,
    ClientError,
    InvalidParamsError,
    InvalidSourceError,
    UpstreamError,
)
from imgproxy_bridge.params.grammar import validate_params
from imgproxy_bridge.signing import PathStyle, build_request_path
from imgproxy_bridge.utils import mask_secret, token_fingerprint
from imgproxy_bridge.utils.exception_logging import (
    format_exception_message,
    log_exception_with_details,
)
from imgproxy_bridge.utils.log import HandlerLogger
from imgproxy_bridge.utils.traced_requests import traced_request

from .options import HandlerOptions

tracer = trace.get_tracer(__name__)

# <bucket name>/<file name>, bucket without dots, file not ending in a slash
SRC_REGEX = re.compile(r"^[^/.]+/.+[^/]$")
FORMAT_REGEX = re.compile(r"^[A-Za-z0-9]+$")

# Ask for the body as stored; it is relayed undecoded either way
DEFAULT_REQUEST_HEADERS = {"Accept-Encoding": "identity"}


def is_valid_locator(src: Optional[str]) -> bool:
    return bool(src) and SRC_REGEX.match(src) is not None


def parse_bucket(locator: str) -> str:
    return locator.split("/", 1)[0]


def _query_values(query, name: str) -> list:
    if hasattr(query, "getlist"):
        return list(query.getlist(name))
    value = query.get(name)
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def _single_value(query, name: str, error_type) -> Optional[str]:
    values = _query_values(query, name)
    if len(values) > 1:
        raise error_type(f"Query parameter '{name}' given {len(values)} times")
    return values[0] if values else None


def resolve_request(
    query, options: HandlerOptions
) -> Tuple[str, Optional[str], Optional[str]]:
    """
    Validate the inbound query.

    Returns:
        (locator, params, format) where params and format may be None

    Raises:
        ClientError: if the source, bucket, params or format are rejected
    """
    src = _single_value(query, "src", InvalidSourceError)
    if not is_valid_locator(src):
        raise InvalidSourceError(f"Source failed validation check: {src!r}")

    bucket = parse_bucket(src)
    if options.bucket_whitelist is not None and bucket not in options.bucket_whitelist:
        raise BucketNotAllowedError(bucket)

    params = _single_value(query, "params", InvalidParamsError) or None
    if params is not None:
        if options.validate_params:
            validate_params(params)
        elif ":" not in params:
            # Unvalidated params without any option field are not forwarded
            params = None

    fmt = _single_value(query, "format", ClientError) or None
    if fmt is not None and not FORMAT_REGEX.match(fmt):
        raise ClientError(f"Invalid format {fmt!r}")

    return src, params, fmt


def prepare_headers(options: HandlerOptions) -> Dict[str, str]:
    """Headers for the imgproxy request; configured headers win over the bearer token."""
    headers = dict(DEFAULT_REQUEST_HEADERS)
    if options.auth_token:
        headers["Authorization"] = f"Bearer {options.auth_token}"
    headers.update(options.request_headers)
    return headers


def filter_response_headers(
    headers: httpx.Headers,
    options: HandlerOptions,
    log: HandlerLogger,
    log_path: str,
) -> Dict[str, str]:
    forwarded = {}
    for name in options.forwarded_headers:
        value = headers.get(name)
        if value:
            log.debug(f"Forwarding header {name} for {log_path}")
            forwarded[name] = value
    return forwarded


def build_backend_url(imgproxy_base_url: Union[str, httpx.URL], request_path: str) -> str:
    """Join the request path onto the scheme, host and port of the base URL."""
    base = httpx.URL(imgproxy_base_url)
    # netloc keeps IPv6 hosts bracketed
    return f"{base.scheme}://{base.netloc.decode('ascii')}{request_path}"


async def _close_upstream(response: httpx.Response, client: httpx.AsyncClient) -> None:
    await response.aclose()
    await client.aclose()


async def stream_response(
    response: httpx.Response,
    client: httpx.AsyncClient,
    log: HandlerLogger,
    log_path: str,
) -> AsyncIterator[bytes]:
    """
    Yield the imgproxy body chunk by chunk, without content decoding, so the
    bytes match the content-length and content-encoding imgproxy sent.

    The status line has been sent by the time this runs, so a transport error
    only ends the stream. The upstream connection is closed on every exit,
    including the client going away.
    """
    try:
        async for chunk in response.aiter_raw():
            yield chunk
        log.debug(f"Stream ended for {log_path}")
    except httpx.HTTPError as e:
        log_exception_with_details(log, f"[Imgproxy] Stream error for {log_path}", e)
    finally:
        await _close_upstream(response, client)


async def handle(
    imgproxy_base_url: Union[str, httpx.URL],
    query: Mapping,
    options: Optional[HandlerOptions] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Response:
    """
    Handle an image request.

    Args:
        imgproxy_base_url: URL of the imgproxy instance, only scheme, host and port are used
        query: The inbound query, either starlette QueryParams or a mapping of str or list values
        options: Handler configuration
        transport: Transport for the outbound client, the default network transport when None

    Returns:
        A bodiless 400/500 response, or a streaming response relaying imgproxy
    """
    options = options or HandlerOptions()
    log = HandlerLogger(options.logging)
    src = _query_values(query, "src")
    log.debug(f"Processing query src={src} params={_query_values(query, 'params')}")

    with traced_request(
        tracer, "imgproxy_request", log, src[0] if len(src) == 1 else None, "Handling image request"
    ) as span:
        try:
            locator, params, fmt = resolve_request(query, options)
        except ClientError as e:
            log.error(f"Rejected image request: {e}")
            span.set_attribute("imgproxy.error", type(e).__name__)
            return Response(status_code=e.status_code)

        span.set_attribute("imgproxy.bucket", parse_bucket(locator))
        request_path = build_request_path(
            locator,
            params=params,
            format=fmt,
            credential=options.credential,
            path_style=options.path_style,
        )
        signature = None
        if options.credential and options.path_style == PathStyle.PLAIN:
            signature = request_path.split("/", 2)[1]
        log_path = mask_secret(request_path, signature)
        log.debug(f"Built imgproxy URL {log_path}")
        if options.auth_token:
            log.debug(f"Using bearer token {token_fingerprint(options.auth_token)}")

        client = httpx.AsyncClient(
            transport=transport, timeout=httpx.Timeout(None), follow_redirects=False
        )
        try:
            request = client.build_request(
                "GET",
                build_backend_url(imgproxy_base_url, request_path),
                headers=prepare_headers(options),
            )
            send = client.send(request, stream=True)
            if options.first_byte_timeout is not None:
                response = await asyncio.wait_for(send, options.first_byte_timeout)
            else:
                response = await send
        except (httpx.HTTPError, httpx.InvalidURL, asyncio.TimeoutError) as e:
            await client.aclose()
            error = UpstreamError(format_exception_message(e))
            log.error(f"Stream error for {log_path}: {error}")
            span.set_attribute("imgproxy.error", format_exception_message(e))
            return Response(status_code=error.status_code)

        log.debug(f"Received status code {response.status_code} for {log_path}")
        span.set_attribute("imgproxy.status_code", response.status_code)

        return StreamingResponse(
            stream_response(response, client, log, log_path),
            status_code=response.status_code,
            headers=filter_response_headers(response.headers, options, log, log_path),
            background=BackgroundTask(_close_upstream, response, client),
        )
