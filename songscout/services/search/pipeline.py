"""
Submission pipeline: retrieval call, enrichment fan-out, assembly.

Each run is tagged with a generation number. A run that finishes after a
newer one has started discards its results instead of installing them, so
the ranking view can never show a blend of two searches.
"""

import asyncio
import logging

from songscout.core.exceptions import EnrichmentError, PayloadError
from songscout.core.models import AudioArtifact, Candidate, RankedEntry
from songscout.services.search.client import RetrievalClient
from songscout.services.search.ranking import RankingView

logger = logging.getLogger(__name__)


class SearchPipeline:
    """Runs searches against the retrieval service and feeds the ranking view.

    Args:
        client: Retrieval service client.
        view: Ranking view that receives the assembled result set.
    """

    def __init__(self, client: RetrievalClient, view: RankingView) -> None:
        self._client = client
        self._view = view
        self._generation = 0
        self._searching = False

    @property
    def searching(self) -> bool:
        return self._searching

    @property
    def generation(self) -> int:
        return self._generation

    async def run(self, artifact: AudioArtifact | None) -> list[Candidate] | None:
        """Search for ``artifact`` and install the enriched candidates.

        Returns:
            The installed candidates, or ``None`` if there was no artifact or
            the run was superseded by a newer one.

        Raises:
            RetrievalError: If the results request fails.
            PayloadError: If the results payload is malformed.
        """
        if artifact is None:
            logger.debug("Search requested without an artifact; ignoring")
            return None

        self._generation += 1
        generation = self._generation
        self._searching = True
        self._view.clear()
        logger.info(
            "Search #%d started for %s (%d bytes)", generation, artifact.name, artifact.size
        )

        try:
            entries = await self._client.search(artifact)
            candidates = await self._enrich_all(entries)
            if generation != self._generation:
                logger.info(
                    "Search #%d superseded by #%d; discarding", generation, self._generation
                )
                return None
            self._view.replace(candidates)
            logger.info(
                "Search #%d finished: %d/%d candidates enriched",
                generation,
                len(candidates),
                len(entries),
            )
            return candidates
        finally:
            if generation == self._generation:
                self._searching = False
                self._view.settle()

    async def _enrich_all(self, entries: list[RankedEntry]) -> list[Candidate]:
        """Fetch every entry's detail concurrently, keeping server order and dropping failures."""
        results = await asyncio.gather(*(self._enrich(entry) for entry in entries))
        return [candidate for candidate in results if candidate is not None]

    async def _enrich(self, entry: RankedEntry) -> Candidate | None:
        try:
            detail = await self._client.fetch_song(entry.song_id)
        except (EnrichmentError, PayloadError) as exc:
            logger.warning("Dropping song %s: %s", entry.song_id, exc)
            return None
        except Exception:
            logger.exception("Unexpected failure enriching song %s", entry.song_id)
            return None
        return Candidate.from_detail(detail, entry)
