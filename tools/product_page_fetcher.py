"""Network access for product pages and product images.

Both fetches are single streamed ``requests.get`` calls with no retries. The
timeout bounds the whole download, not only each socket read, and bodies are
capped in size. Every failure surfaces as one of the exceptions below so the
scraper can collapse it into its fallback result.
"""

from __future__ import annotations

import base64
import contextlib
import logging
import re
import time
from typing import Dict, Optional, Tuple, Type
from urllib.parse import urlparse

import requests

from smartfit_app.config import DEFAULT_IMAGE_TIMEOUT, DEFAULT_PAGE_TIMEOUT, DEFAULT_USER_AGENT
from smartfit_app.logging_config import get_logger, log_event

logger = get_logger(__name__)

DEFAULT_IMAGE_CONTENT_TYPE = "image/jpeg"
MAX_PAGE_BYTES = 5 * 1024 * 1024
MAX_IMAGE_BYTES = 10 * 1024 * 1024
_CHUNK_SIZE = 64 * 1024
_CHARSET = re.compile(r"charset=[\"']?([\w.:-]+)", re.IGNORECASE)

_clock = time.monotonic


class InvalidProductURLError(ValueError):
    """The URL is not an absolute HTTP(S) URL."""


class ProductPageFetchError(RuntimeError):
    """The product page could not be retrieved."""


class ImageDownloadError(RuntimeError):
    """The product image could not be retrieved."""


def _validate_url(url: str) -> None:
    try:
        parsed = urlparse(url)
    except ValueError as exc:
        raise InvalidProductURLError(f"Unsupported or invalid URL: {url}") from exc
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        raise InvalidProductURLError(f"Unsupported or invalid URL: {url}")


def _get(
    url: str,
    timeout: Optional[float],
    max_bytes: int,
    error: Type[RuntimeError],
    headers: Optional[Dict[str, str]] = None,
) -> Tuple[requests.Response, bytes]:
    """GET ``url`` and read the body within ``timeout`` seconds and ``max_bytes``.

    Network errors, non-2xx statuses, an exceeded deadline and an oversized
    body all raise ``error``.
    """

    deadline = None if timeout is None else _clock() + timeout
    try:
        response = requests.get(url, headers=headers, timeout=timeout, stream=True)
    except requests.RequestException as exc:
        raise error(f"Network error fetching {url}: {exc}") from exc

    with contextlib.closing(response):
        if not 200 <= response.status_code < 300:
            raise error(f"Failed to fetch {url}: HTTP {response.status_code}")
        body = bytearray()
        try:
            for chunk in response.iter_content(chunk_size=_CHUNK_SIZE):
                body.extend(chunk)
                if len(body) > max_bytes:
                    raise error(f"Response from {url} exceeds {max_bytes} bytes")
                if deadline is not None and _clock() > deadline:
                    raise error(f"Timed out after {timeout}s reading {url}")
        except requests.RequestException as exc:
            raise error(f"Network error reading {url}: {exc}") from exc
    return response, bytes(body)


def _decode(response: requests.Response, body: bytes) -> str:
    """Decode with the declared charset, defaulting to UTF-8."""

    match = _CHARSET.search(response.headers.get("content-type") or "")
    encoding = match.group(1) if match else "utf-8"
    try:
        return body.decode(encoding, errors="replace")
    except LookupError:
        return body.decode("utf-8", errors="replace")


def fetch_product_page(
    url: str,
    timeout: Optional[float] = DEFAULT_PAGE_TIMEOUT,
    user_agent: str = DEFAULT_USER_AGENT,
) -> str:
    """Fetch the raw HTML for a retailer product page.

    Args:
        url: HTTP or HTTPS URL pointing to a retailer product page.
        timeout: Seconds allowed for the whole fetch, body included.
        user_agent: Browser User-Agent; retailers serve bot pages to the default one.

    Raises:
        InvalidProductURLError: If the URL is not HTTP/HTTPS or missing a host.
        ProductPageFetchError: For network issues, non-2xx responses, timeouts
            or pages larger than ``MAX_PAGE_BYTES``.
    """

    _validate_url(url)
    try:
        response, body = _get(
            url, timeout, MAX_PAGE_BYTES, ProductPageFetchError, headers={"User-Agent": user_agent}
        )
    except ProductPageFetchError as exc:
        log_event(logger, logging.WARNING, "product_page_fetch_failed", url=url, error=str(exc))
        raise
    log_event(logger, logging.DEBUG, "product_page_fetched", url=url, length=len(body))
    return _decode(response, body)


def fetch_image_as_data_url(url: str, timeout: Optional[float] = DEFAULT_IMAGE_TIMEOUT) -> str:
    """Download an image and return it as ``data:<content-type>;base64,<payload>``.

    The response content-type is used verbatim, defaulting to ``image/jpeg``.
    """

    response, body = _get(url, timeout, MAX_IMAGE_BYTES, ImageDownloadError)
    content_type = response.headers.get("content-type") or DEFAULT_IMAGE_CONTENT_TYPE
    log_event(
        logger,
        logging.DEBUG,
        "product_image_downloaded",
        url=url,
        content_type=content_type,
        length=len(body),
    )
    return f"data:{content_type};base64,{base64.b64encode(body).decode('ascii')}"


__all__ = [
    "DEFAULT_IMAGE_CONTENT_TYPE",
    "ImageDownloadError",
    "InvalidProductURLError",
    "MAX_IMAGE_BYTES",
    "MAX_PAGE_BYTES",
    "ProductPageFetchError",
    "fetch_image_as_data_url",
    "fetch_product_page",
]
