"""
SongScout exception hierarchy.

All application-specific exceptions inherit from SongScoutError. Each
carries a short ``title`` and a user-facing ``detail`` so the orchestrator
can turn any terminal failure into a notification without knowing its type.
"""

from datetime import UTC, datetime


class SongScoutError(Exception):
    """Base exception for all SongScout errors."""

    def __init__(
        self,
        detail: str = "Unexpected error occurred.",
        code: str = "SONGSCOUT_ERROR",
        title: str = "Error!",
    ) -> None:
        self.detail = detail
        self.code = code
        self.title = title
        self.timestamp = datetime.now(UTC).isoformat()
        super().__init__(detail)


class CaptureError(SongScoutError):
    """Raised when the microphone cannot be opened or read."""

    def __init__(
        self, detail: str = "Failed to access microphone. Please check permissions."
    ) -> None:
        super().__init__(detail=detail, code="CAPTURE_ERROR", title="Microphone Error")


class ValidationError(SongScoutError):
    """Raised when an uploaded file does not declare an audio media type."""

    def __init__(self, media_type: str | None = None) -> None:
        self.media_type = media_type
        super().__init__(
            detail="Please upload a valid audio file.",
            code="VALIDATION_ERROR",
            title="Invalid file type",
        )


class RetrievalError(SongScoutError):
    """Raised when the results request fails in transport or returns a non-success status."""

    def __init__(self, reason: str = "", status_code: int | None = None) -> None:
        self.reason = reason
        self.status_code = status_code
        super().__init__(detail="Failed to request server.", code="RETRIEVAL_ERROR")


class PayloadError(SongScoutError):
    """Raised when a response body does not have the expected JSON shape."""

    def __init__(self, reason: str = "") -> None:
        self.reason = reason
        super().__init__(detail="Internal server error.", code="PAYLOAD_ERROR")


class EnrichmentError(SongScoutError):
    """Raised when a single song detail lookup fails."""

    def __init__(self, song_id: str, reason: str = "") -> None:
        self.song_id = song_id
        self.reason = reason
        super().__init__(
            detail=f"Failed to fetch details for song {song_id}",
            code="ENRICHMENT_ERROR",
        )


class InvalidTransitionError(SongScoutError):
    """Raised when an action is not allowed in the current recording state."""

    def __init__(self, action: str, state: str) -> None:
        self.action = action
        self.state = state
        super().__init__(
            detail=f"Cannot {action} while {state}",
            code="INVALID_TRANSITION",
        )


class SearchInProgressError(SongScoutError):
    """Raised when an action is attempted while a search is in flight."""

    def __init__(self, action: str = "continue") -> None:
        self.action = action
        super().__init__(
            detail=f"Cannot {action} while a search is in progress",
            code="SEARCH_IN_PROGRESS",
        )
