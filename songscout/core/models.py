"""
Domain and wire models shared across the capture and search layers.

Wire models mirror the retrieval service's JSON envelopes so that any
unexpected shape fails Pydantic validation at the client boundary.
"""

from dataclasses import dataclass, field
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Capture
# ---------------------------------------------------------------------------


class RecordingState(StrEnum):
    """Possible states of the local recording session."""

    idle = "idle"
    recording = "recording"
    ready = "ready"
    playing = "playing"


class ArtifactOrigin(StrEnum):
    """Where an audio artifact came from."""

    microphone = "microphone"
    upload = "upload"


@dataclass(frozen=True)
class AudioArtifact:
    """A captured or uploaded audio payload, treated as one atomic unit."""

    data: bytes = field(repr=False)
    media_type: str
    name: str
    origin: ArtifactOrigin = ArtifactOrigin.upload

    @property
    def size(self) -> int:
        return len(self.data)


# ---------------------------------------------------------------------------
# Notifications
# ---------------------------------------------------------------------------


class Severity(StrEnum):
    """Visual weight of a user notification."""

    default = "default"
    destructive = "destructive"


class Notification(BaseModel):
    """A user-visible message routed to the presentation layer."""

    title: str
    description: str
    severity: Severity = Severity.default


# ---------------------------------------------------------------------------
# Retrieval (POST /results)
# ---------------------------------------------------------------------------


class RankedEntry(BaseModel):
    """One ranked identifier with the scores computed by the retrieval service."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    song_id: str
    score_audio: float
    score_text: float
    synthesized_score: float


class RankedList(BaseModel):
    result: list[RankedEntry]


class RetrievalResponse(BaseModel):
    """``{"result": {"result": [...]}}`` envelope returned by POST /results."""

    result: RankedList


# ---------------------------------------------------------------------------
# Enrichment (GET /song/{song_id})
# ---------------------------------------------------------------------------


class Thumbnail(BaseModel):
    model_config = ConfigDict(extra="allow")

    url: str | None = None


class SongDetail(BaseModel):
    """Song metadata as returned by the detail endpoint.

    Unknown fields are kept so that nothing the service sends is lost when
    the detail is merged into a Candidate.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    title: str
    url: str | None = None
    thumbnails: list[Thumbnail] = Field(default_factory=list)


class SongDetailEnvelope(BaseModel):
    result: SongDetail


class SongDetailResponse(BaseModel):
    """``{"result": {"result": {...}}}`` envelope returned by GET /song/{id}."""

    result: SongDetailEnvelope


# ---------------------------------------------------------------------------
# Ranking
# ---------------------------------------------------------------------------


class RankingDimension(StrEnum):
    """Score field used to order the displayed results."""

    final = "final"
    audio = "audio"
    text = "text"


class Candidate(SongDetail):
    """A fully enriched search result: song detail plus the three ranking scores.

    Serialises (``model_dump(by_alias=True)``) to the detail object with
    ``audioScore``, ``textScore`` and ``finalScore`` merged onto it.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True, frozen=True)

    song_id: str
    audio_score: float = Field(alias="audioScore")
    text_score: float = Field(alias="textScore")
    final_score: float = Field(alias="finalScore")

    @classmethod
    def from_detail(cls, detail: SongDetail, entry: RankedEntry) -> "Candidate":
        """Merge a ranked entry's scores into its fetched song detail."""
        data = detail.model_dump()
        data.update(
            song_id=entry.song_id,
            audioScore=entry.score_audio,
            textScore=entry.score_text,
            finalScore=entry.synthesized_score,
        )
        return cls.model_validate(data)

    @property
    def thumbnail_url(self) -> str | None:
        return next((t.url for t in self.thumbnails if t.url), None)

    def score(self, dimension: RankingDimension) -> float:
        if dimension == RankingDimension.audio:
            return self.audio_score
        if dimension == RankingDimension.text:
            return self.text_score
        return self.final_score
