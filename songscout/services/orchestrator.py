"""Capture-and-search orchestrator.

Single entry point for presentation layers: every user intent (record,
stop, upload, play, pause, download, search, re-rank) is a method here.
Terminal failures are turned into notifications; per-song enrichment
failures are only logged by the pipeline.

Usage::

    orchestrator = create_orchestrator(notifier=my_notifier)
    await orchestrator.start_capture()
    await orchestrator.stop_capture()
    candidates = await orchestrator.submit()
    orchestrator.set_ranking_dimension("text")
    await orchestrator.aclose()
"""

import logging
from pathlib import Path

from songscout.core.config import get_settings
from songscout.core.exceptions import (
    CaptureError,
    InvalidTransitionError,
    SongScoutError,
    ValidationError,
)
from songscout.core.models import (
    AudioArtifact,
    Candidate,
    Notification,
    RankingDimension,
    RecordingState,
    Severity,
)
from songscout.services.capture import BasePlayer, CaptureSource, NullPlayer
from songscout.services.notifications import (
    UNEXPECTED_ERROR,
    BaseNotifier,
    LoggingNotifier,
    notification_for,
)
from songscout.services.search import RankingView, RetrievalClient, SearchPipeline
from songscout.services.session import RecordingSession

logger = logging.getLogger(__name__)

UPLOAD_ACCEPTED = Notification(
    title="File uploaded",
    description="Audio file uploaded successfully.",
    severity=Severity.default,
)


class SearchOrchestrator:
    """Wires capture, session state, search and ranking behind user intents.

    Args:
        client: Retrieval service client (owned; closed by ``aclose``).
        capture: Microphone / upload source.
        notifier: Sink for user-visible notifications.
        player: Local playback backend.
        session: Recording state machine.
        view: Ranking view holding the displayed results.
    """

    def __init__(
        self,
        client: RetrievalClient,
        capture: CaptureSource,
        notifier: BaseNotifier | None = None,
        player: BasePlayer | None = None,
        session: RecordingSession | None = None,
        view: RankingView | None = None,
    ) -> None:
        self._client = client
        self._capture = capture
        self._notifier = notifier or LoggingNotifier()
        self._player = player or NullPlayer()
        self._session = session or RecordingSession()
        self._view = view or RankingView()
        self._pipeline = SearchPipeline(client, self._view)

    # -- read-only state for the presentation layer --

    @property
    def state(self) -> RecordingState:
        return self._session.state

    @property
    def artifact(self) -> AudioArtifact | None:
        return self._session.artifact

    @property
    def artifact_path(self) -> Path | None:
        handle = self._session.handle
        return handle.path if handle else None

    @property
    def player_active(self) -> bool:
        return self._player.active

    @property
    def searching(self) -> bool:
        return self._session.locked or self._pipeline.searching

    @property
    def results(self) -> tuple[Candidate, ...]:
        return self._view.candidates

    @property
    def loading(self) -> bool:
        return self._view.loading

    @property
    def dimension(self) -> RankingDimension:
        return self._view.dimension

    def _notify(self, notification: Notification) -> None:
        self._notifier.notify(notification)

    def _stop_playback(self) -> None:
        if self._session.state == RecordingState.playing:
            self._player.stop()
            self._session.pause()

    # -- capture --

    async def start_capture(self) -> bool:
        """Start recording from the microphone.

        Returns:
            True if recording started, False if the microphone failed (notified).

        Raises:
            InvalidTransitionError: If already recording.
            SearchInProgressError: If a search is in flight.
        """
        self._session.check_can_record()
        self._stop_playback()
        try:
            await self._capture.start()
        except CaptureError as exc:
            self._notify(notification_for(exc))
            return False
        self._session.begin_recording()
        return True

    async def stop_capture(self) -> AudioArtifact | None:
        """Finish recording and hold the take as the live artifact.

        Returns:
            The new artifact, or None if finalizing failed (notified).
        """
        if self._session.state != RecordingState.recording:
            raise InvalidTransitionError("stop recording", self._session.state.value)
        try:
            artifact = await self._capture.stop()
        except CaptureError as exc:
            self._session.abort_recording()
            self._notify(notification_for(exc))
            return None
        self._session.finish_recording(artifact)
        return artifact

    def upload_file(self, data: bytes, name: str, media_type: str | None) -> bool:
        """Use an uploaded file as the live artifact if it is audio.

        Returns:
            True if accepted; False if rejected (state and artifact untouched).
        """
        self._session.check_can_upload()
        try:
            artifact = self._capture.upload(data, name, media_type)
        except ValidationError as exc:
            self._notify(notification_for(exc))
            return False
        return self._accept_upload(artifact)

    def upload_path(self, path: str | Path) -> bool:
        """Upload a local audio file, guessing its media type from the name."""
        self._session.check_can_upload()
        try:
            artifact = self._capture.upload_path(path)
        except ValidationError as exc:
            self._notify(notification_for(exc))
            return False
        return self._accept_upload(artifact)

    def _accept_upload(self, artifact: AudioArtifact) -> bool:
        self._stop_playback()
        self._session.load_upload(artifact)
        logger.info(
            "Accepted upload %s (%s, %d bytes)", artifact.name, artifact.media_type, artifact.size
        )
        self._notify(UPLOAD_ACCEPTED)
        return True

    # -- playback & download --

    def play(self) -> None:
        path = self._session.play()
        self._player.play(path)

    def pause(self) -> None:
        self._player.stop()
        self._session.pause()

    def playback_ended(self) -> None:
        """Called by the presentation layer when audio reaches its end."""
        if self._session.state == RecordingState.playing:
            self._session.pause()

    def download(self, target_dir: str | Path | None = None) -> Path:
        """Write the live artifact under its own file name. Does not change state."""
        artifact = self._session.check_can_download()
        directory = Path(target_dir or get_settings().downloads_dir)
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / Path(artifact.name).name
        path.write_bytes(artifact.data)
        logger.info("Saved %s to %s", artifact.name, path)
        return path

    # -- search --

    async def submit(self) -> list[Candidate] | None:
        """Search for the live artifact.

        Whatever the outcome, the session returns to idle and the artifact
        is released afterwards.

        Returns:
            The installed candidates; None if there was nothing to submit or
            the search failed (notified).

        Raises:
            SearchInProgressError: If another search is in flight.
        """
        if self._session.artifact is None:
            logger.debug("Nothing to search for")
            return None

        self._stop_playback()
        artifact = self._session.lock_for_submission()
        try:
            return await self._pipeline.run(artifact)
        except SongScoutError as exc:
            self._notify(notification_for(exc))
            return None
        except Exception:
            logger.exception("Search failed unexpectedly")
            self._notify(UNEXPECTED_ERROR)
            return None
        finally:
            self._session.unlock_after_submission()

    def set_ranking_dimension(self, dimension: RankingDimension | str) -> bool:
        """Re-order the displayed results. Returns False if nothing changed."""
        return self._view.set_dimension(dimension)

    async def aclose(self) -> None:
        """Release the microphone, the live artifact and the HTTP client."""
        self._capture.close()
        if self._session.state == RecordingState.playing:
            self._player.stop()
        self._session.close()
        await self._client.aclose()


def create_orchestrator(
    notifier: BaseNotifier | None = None,
    player: BasePlayer | None = None,
    api_url: str | None = None,
) -> SearchOrchestrator:
    """Build an orchestrator from application settings."""
    settings = get_settings()
    return SearchOrchestrator(
        client=RetrievalClient(base_url=api_url),
        capture=CaptureSource(),
        notifier=notifier,
        player=player,
        session=RecordingSession(scratch_dir=settings.scratch_dir or None),
    )
