"""
Request Executor

Performs a single HTTP round-trip for a request descriptor and normalizes the
response into a displayable shape.
"""

import asyncio
import json
import logging
import math
import time
from typing import Any, Dict, Mapping, Optional

import aiohttp

from ..core.config import HTTPConfig
from ..core.exceptions import NetworkError
from ..core.logging import get_logger, log_structured
from ..core.models import RequestDescriptor, ResponseResult

logger = get_logger(__name__)

JSON_CONTENT_TYPE = "application/json"


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Non-standard JSON constant: {name}")


def _finite_float(literal: str) -> float:
    value = float(literal)
    if not math.isfinite(value):
        raise ValueError(f"Number out of range: {literal}")
    return value


def parse_body(text: str) -> Any:
    """
    Parse response text as strict JSON, falling back to the text itself.

    Non-finite numbers (``NaN``, ``Infinity``, or literals such as ``1e400``
    that overflow a float) are not JSON values, so such bodies stay text.

    Args:
        text: Decoded response body

    Returns:
        Parsed JSON value, or ``text`` unchanged when it is not valid JSON
    """
    try:
        return json.loads(
            text, parse_constant=_reject_constant, parse_float=_finite_float
        )
    except (ValueError, RecursionError):
        return text


def collapse_headers(raw_headers: Mapping[str, str]) -> Dict[str, str]:
    """
    Lowercase header names and join repeated headers with ``", "``.

    ``raw_headers`` is the transport multidict, so ``items()`` yields every
    occurrence of a repeated header.
    """
    headers: Dict[str, str] = {}
    for name, value in raw_headers.items():
        key = name.lower()
        if key in headers:
            headers[key] = f"{headers[key]}, {value}"
        else:
            headers[key] = value
    return headers


class RequestExecutor:
    """
    Stateless HTTP request executor.

    Every call to :meth:`send` is independent. A shared ``aiohttp.ClientSession``
    may be injected, in which case the caller owns its lifetime; otherwise a
    session is opened and closed for each request.
    """

    def __init__(
        self,
        config: Optional[HTTPConfig] = None,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> None:
        self.config = config or HTTPConfig()
        self._session = session

    async def send(self, descriptor: RequestDescriptor) -> ResponseResult:
        """
        Send a request and capture the normalized response.

        Args:
            descriptor: Method, URL and optional body to send

        Returns:
            ResponseResult with status, reason, headers and parsed data

        Raises:
            NetworkError: If the transport cannot complete the round-trip
        """
        payload = descriptor.body.encode("utf-8") if descriptor.sends_body else None
        start = time.monotonic()

        try:
            if self._session is not None:
                result = await self._round_trip(self._session, descriptor, payload)
            else:
                async with aiohttp.ClientSession() as session:
                    result = await self._round_trip(session, descriptor, payload)

        except asyncio.TimeoutError as e:
            logger.warning(f"{descriptor.method} {descriptor.url} timed out")
            raise NetworkError(
                f"Request timed out: {descriptor.method} {descriptor.url}",
                {"error_type": type(e).__name__},
            ) from e
        except (aiohttp.ClientError, ValueError, OSError) as e:
            logger.warning(f"{descriptor.method} {descriptor.url} failed: {e}")
            raise NetworkError(
                f"Failed to send {descriptor.method} {descriptor.url}: {e}",
                {"error_type": type(e).__name__},
            ) from e

        log_structured(
            logger,
            logging.DEBUG,
            "Request completed",
            method=descriptor.method,
            url=descriptor.url,
            status=result.status,
            elapsed_ms=int((time.monotonic() - start) * 1000),
        )
        return result

    async def _round_trip(
        self,
        session: aiohttp.ClientSession,
        descriptor: RequestDescriptor,
        payload: Optional[bytes],
    ) -> ResponseResult:
        async with session.request(
            method=descriptor.method,
            url=descriptor.url,
            headers={"Content-Type": JSON_CONTENT_TYPE},
            data=payload,
            allow_redirects=self.config.follow_redirects,
            ssl=self.config.verify_ssl,
            timeout=aiohttp.ClientTimeout(total=self.config.request_timeout),
        ) as response:
            raw = await response.read()

            return ResponseResult(
                status=response.status,
                status_text=response.reason or "",
                headers=collapse_headers(response.headers),
                data=parse_body(raw.decode("utf-8-sig", errors="replace")),
            )
