from __future__ import annotations

import asyncio
import logging
from pathlib import Path, PurePosixPath
from types import TracebackType
from urllib.parse import unquote, urlparse
from urllib.request import url2pathname

import httpx
from bs4 import UnicodeDammit

from .config import HttpConfig
from .errors import InputError, NetworkError, ResourceIOError

logger = logging.getLogger(__name__)

REMOTE_SCHEMES = frozenset({"http", "https"})


def resolve_location(location: str) -> str:
    """Turn a file path or URL into an absolute URI.

    Anything without a recognised scheme is treated as a local path, which
    also covers Windows drive letters such as ``C:\\images``.
    """
    value = (location or "").strip()
    if not value:
        raise InputError("Input location is empty")
    scheme = urlparse(value).scheme.lower()
    if scheme in REMOTE_SCHEMES or scheme == "file":
        return value
    if len(scheme) > 1:
        raise InputError(f"Unsupported location scheme: {scheme}")
    return Path(value).expanduser().resolve().as_uri()


def is_local(uri: str) -> bool:
    return urlparse(uri).scheme.lower() == "file"


def uri_to_path(uri: str) -> Path:
    return Path(url2pathname(urlparse(uri).path))


def uri_extension(uri: str) -> str:
    return PurePosixPath(unquote(urlparse(uri).path)).suffix


def uri_stem(uri: str) -> str:
    return PurePosixPath(unquote(urlparse(uri).path)).stem


class ResourceFetcher:
    """Reads resources from disk or over HTTP through one shared client.

    The client is safe for concurrent use, so a single fetcher serves every
    fetch of a conversion.
    """

    def __init__(
        self,
        config: HttpConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config or HttpConfig()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> ResourceFetcher:
        self._client = httpx.AsyncClient(
            headers={"User-Agent": self._config.user_agent},
            follow_redirects=self._config.follow_redirects,
            timeout=self._config.timeout_s,
            transport=self._transport,
        )
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def fetch_bytes(self, uri: str) -> bytes:
        if is_local(uri):
            return await self._read_file(uri)
        response = await self._get(uri)
        return response.content

    async def fetch_document(self, uri: str) -> tuple[bytes, str | None]:
        """Raw document bytes and the charset named by the server, if any.

        The bytes are left undecoded so the parser can honour a BOM or a
        charset declared inside the document.
        """
        if is_local(uri):
            return await self._read_file(uri), None
        response = await self._get(uri)
        return response.content, response.charset_encoding

    async def fetch_text(self, uri: str) -> str:
        data, charset = await self.fetch_document(uri)
        dammit = UnicodeDammit(data, known_definite_encodings=[charset] if charset else [], is_html=True)
        return dammit.unicode_markup or ""

    async def _read_file(self, uri: str) -> bytes:
        path = uri_to_path(uri)
        logger.debug("reading %s", path)
        try:
            return await asyncio.to_thread(path.read_bytes)
        except OSError as exc:
            raise ResourceIOError(f"Cannot read {path}: {exc.strerror or exc}") from exc

    async def _get(self, uri: str) -> httpx.Response:
        scheme = urlparse(uri).scheme.lower()
        if scheme not in REMOTE_SCHEMES:
            raise InputError(f"Unsupported location scheme: {scheme or '<none>'}")
        if self._client is None:
            raise RuntimeError("ResourceFetcher must be used as an async context manager")
        logger.debug("GET %s", uri)
        try:
            response = await self._client.get(uri)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise NetworkError(f"GET {uri} returned HTTP {exc.response.status_code}") from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise NetworkError(f"GET {uri} failed: {exc}") from exc
        return response


__all__ = [
    "ResourceFetcher",
    "is_local",
    "resolve_location",
    "uri_extension",
    "uri_stem",
    "uri_to_path",
]
