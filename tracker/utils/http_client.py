"""
Shared async HTTP client with:
- Timeouts
- Optional retry with exponential backoff (off by default)
- Status checking on every request (4xx/5xx raise HttpError)
"""
import asyncio
import logging
from typing import Any, Optional

import aiohttp
from aiohttp import ClientSession, TCPConnector

from tracker.config.settings import settings

logger = logging.getLogger(__name__)

_RETRYABLE_STATUSES = {429, 500, 502, 503, 504}


class HttpError(Exception):
    def __init__(self, status: int, message: str):
        self.status = status
        super().__init__(f"HTTP {status}: {message}")


def build_session() -> ClientSession:
    connector = TCPConnector(limit=20)
    timeout = aiohttp.ClientTimeout(total=settings.HTTP_TIMEOUT_SECONDS)
    return ClientSession(
        connector=connector,
        timeout=timeout,
        trust_env=False,
    )


async def fetch_json(
    session: ClientSession,
    url: str,
    *,
    headers: Optional[dict] = None,
) -> Any:
    """GET and decode a JSON body."""
    return await _request_with_retry(session, "GET", url, headers=headers, as_json=True)


async def send(
    session: ClientSession,
    method: str,
    url: str,
    *,
    json_body: Any = None,
) -> str:
    """Issue a mutating request; the response body is returned as text."""
    return await _request_with_retry(session, method, url, json_body=json_body, as_json=False)


async def _request_with_retry(
    session: ClientSession,
    method: str,
    url: str,
    *,
    headers: Optional[dict] = None,
    json_body: Any = None,
    as_json: bool = True,
    attempts: Optional[int] = None,
    backoff: Optional[float] = None,
) -> Any:
    if attempts is None:
        attempts = settings.HTTP_RETRY_ATTEMPTS
    if backoff is None:
        backoff = settings.HTTP_RETRY_BACKOFF
    last_exc: Exception = RuntimeError("No attempts made")
    for attempt in range(1, attempts + 1):
        try:
            async with session.request(
                method,
                url,
                headers=headers,
                json=json_body,
            ) as resp:
                if resp.status in _RETRYABLE_STATUSES and attempt < attempts:
                    wait = backoff ** attempt
                    logger.warning(
                        "Retryable HTTP status",
                        extra={"status": resp.status, "attempt": attempt, "wait": wait},
                    )
                    await asyncio.sleep(wait)
                    continue
                if resp.status >= 400:
                    body = await resp.text()
                    raise HttpError(resp.status, body[:200])
                if as_json:
                    return await resp.json(content_type=None)
                return await resp.text()
        except (aiohttp.ClientConnectionError, asyncio.TimeoutError) as exc:
            last_exc = exc
            if attempt < attempts:
                wait = backoff ** attempt
                logger.warning(
                    "Connection error, retrying",
                    extra={"error": str(exc), "attempt": attempt, "wait": wait},
                )
                await asyncio.sleep(wait)
    raise last_exc
