"""
Async HTTP client for the song retrieval service.

Two endpoints are used:

- ``POST /results`` with a multipart ``file`` field returns the ranked ids.
- ``GET /song/{song_id}`` returns the metadata for one song.

httpx and Pydantic errors never escape this module; they are translated
into ``RetrievalError``, ``PayloadError`` or ``EnrichmentError``.
"""

import logging

import httpx
import pydantic
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from songscout.core.config import get_settings
from songscout.core.exceptions import EnrichmentError, PayloadError, RetrievalError
from songscout.core.models import (
    AudioArtifact,
    RankedEntry,
    RetrievalResponse,
    SongDetail,
    SongDetailResponse,
)

logger = logging.getLogger(__name__)


def parse_ranked_entries(payload: object) -> list[RankedEntry]:
    """Validate a ``POST /results`` body and return its ranked entries.

    Raises:
        PayloadError: If ``result.result`` is missing or malformed.
    """
    try:
        return RetrievalResponse.model_validate(payload).result.result
    except pydantic.ValidationError as exc:
        raise PayloadError(f"Unexpected results payload: {exc.error_count()} error(s)") from exc


def parse_song_detail(payload: object) -> SongDetail:
    """Validate a ``GET /song/{id}`` body and return the song detail.

    Raises:
        PayloadError: If ``result.result`` is missing or malformed.
    """
    try:
        return SongDetailResponse.model_validate(payload).result.result
    except pydantic.ValidationError as exc:
        raise PayloadError(f"Unexpected song payload: {exc.error_count()} error(s)") from exc


class RetrievalClient:
    """Thin async wrapper around ``httpx.AsyncClient`` for the retrieval service.

    Args:
        base_url: Service root; falls back to ``api_url`` from settings.
        timeout: Request timeout in seconds; falls back to ``http_timeout``.
        max_attempts: Attempts per song detail fetch on transport errors.
        retry_wait: Exponential backoff multiplier between attempts, in seconds.
        transport: Optional httpx transport (e.g. ``httpx.MockTransport``).
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        max_attempts: int | None = None,
        retry_wait: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        settings = get_settings()
        self._base_url = (base_url or settings.api_url).rstrip("/")
        self._max_attempts = max(1, max_attempts or settings.enrichment_max_attempts)
        self._retry_wait = settings.enrichment_retry_wait if retry_wait is None else retry_wait
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=timeout if timeout is not None else settings.http_timeout,
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "RetrievalClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    # -- retrieval --

    async def search(self, artifact: AudioArtifact) -> list[RankedEntry]:
        """Submit an artifact and return the ranked entries in server order.

        Raises:
            RetrievalError: On transport failure or a non-success status.
            PayloadError: If the body is not JSON of the expected shape.
        """
        files = {"file": (artifact.name, artifact.data, artifact.media_type)}
        try:
            resp = await self._client.post("/results", files=files)
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            logger.warning("Retrieval request returned HTTP %s", status)
            raise RetrievalError(f"HTTP {status}", status_code=status) from exc
        except httpx.HTTPError as exc:
            logger.warning("Retrieval request to %s failed: %s", self._base_url, exc)
            raise RetrievalError(str(exc)) from exc

        try:
            payload = resp.json()
        except ValueError as exc:
            raise PayloadError("Results response is not valid JSON") from exc

        entries = parse_ranked_entries(payload)
        logger.info("Retrieval returned %d ranked entries", len(entries))
        return entries

    # -- enrichment --

    async def _get_song(self, song_id: str) -> httpx.Response:
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self._max_attempts),
            wait=wait_exponential(multiplier=self._retry_wait, max=8),
            retry=retry_if_exception_type(httpx.TransportError),
            reraise=True,
        ):
            with attempt:
                resp = await self._client.get(f"/song/{song_id}")
        return resp

    async def fetch_song(self, song_id: str) -> SongDetail:
        """Fetch the metadata for one ranked song.

        Transport errors are retried up to ``max_attempts`` times.

        Raises:
            EnrichmentError: On transport failure or a non-success status.
            PayloadError: If the body is not JSON of the expected shape.
        """
        try:
            resp = await self._get_song(song_id)
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise EnrichmentError(song_id, f"HTTP {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            raise EnrichmentError(song_id, str(exc)) from exc

        try:
            payload = resp.json()
        except ValueError as exc:
            raise PayloadError(f"Song {song_id} response is not valid JSON") from exc
        return parse_song_detail(payload)
