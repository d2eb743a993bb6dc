"""
Recording session state machine.

States: idle -> recording -> ready <-> playing

Uploads jump straight to ready. While a submission is in flight the
session is locked and every transition is rejected; unlocking always
returns to idle and releases the submitted artifact.
"""

import logging
from pathlib import Path

from songscout.core.exceptions import InvalidTransitionError, SearchInProgressError
from songscout.core.models import AudioArtifact, RecordingState
from songscout.services.capture.artifact import ArtifactHandle

logger = logging.getLogger(__name__)


class RecordingSession:
    """Tracks the recording state and owns the single live artifact.

    Args:
        scratch_dir: Where artifact handles are materialised (``None`` = temp dir).
    """

    def __init__(self, scratch_dir: str | Path | None = None) -> None:
        self._scratch_dir = scratch_dir or None
        self._state = RecordingState.idle
        self._handle: ArtifactHandle | None = None
        self._locked = False

    @property
    def state(self) -> RecordingState:
        return self._state

    @property
    def artifact(self) -> AudioArtifact | None:
        return self._handle.artifact if self._handle else None

    @property
    def handle(self) -> ArtifactHandle | None:
        return self._handle

    @property
    def locked(self) -> bool:
        return self._locked

    def _require(self, action: str, *allowed: RecordingState) -> None:
        if self._locked:
            raise SearchInProgressError(action)
        if self._state not in allowed:
            raise InvalidTransitionError(action, self._state.value)

    def _transition(self, state: RecordingState) -> None:
        logger.debug("Recording state %s -> %s", self._state.value, state.value)
        self._state = state

    def _release(self) -> None:
        if self._handle is not None:
            self._handle.release()
            self._handle = None

    def _adopt(self, artifact: AudioArtifact) -> None:
        self._release()
        self._handle = ArtifactHandle(artifact, self._scratch_dir)

    # -- capture --

    def check_can_record(self) -> None:
        """Raise unless a new capture may start from the current state."""
        self._require(
            "start recording", RecordingState.idle, RecordingState.ready, RecordingState.playing
        )

    def begin_recording(self) -> None:
        """Enter ``recording``, dropping any previously held artifact."""
        self.check_can_record()
        self._release()
        self._transition(RecordingState.recording)

    def finish_recording(self, artifact: AudioArtifact) -> None:
        """Hold the finished take and enter ``ready``."""
        self._require("stop recording", RecordingState.recording)
        self._adopt(artifact)
        self._transition(RecordingState.ready)

    def abort_recording(self) -> None:
        """Return to ``idle`` after a capture that produced no artifact."""
        self._require("abort recording", RecordingState.recording)
        self._transition(RecordingState.idle)

    def check_can_upload(self) -> None:
        """Raise unless an upload may replace the current state."""
        self._require("upload", RecordingState.idle, RecordingState.ready, RecordingState.playing)

    def load_upload(self, artifact: AudioArtifact) -> None:
        """Hold an uploaded artifact and enter ``ready``."""
        self.check_can_upload()
        self._adopt(artifact)
        self._transition(RecordingState.ready)

    # -- playback --

    def play(self) -> Path:
        """Enter ``playing`` and return the path to play from."""
        self._require("play", RecordingState.ready)
        self._transition(RecordingState.playing)
        return self._handle.path

    def pause(self) -> None:
        """Leave ``playing`` (user pause or end of audio)."""
        self._require("pause", RecordingState.playing)
        self._transition(RecordingState.ready)

    def check_can_download(self) -> AudioArtifact:
        self._require("download", RecordingState.ready, RecordingState.playing)
        return self._handle.artifact

    # -- submission --

    def lock_for_submission(self) -> AudioArtifact:
        """Lock the session for a search and return the artifact to submit."""
        self._require("search", RecordingState.ready)
        self._locked = True
        return self._handle.artifact

    def unlock_after_submission(self) -> None:
        """Unlock, release the submitted artifact and return to ``idle``."""
        self._locked = False
        self._release()
        self._transition(RecordingState.idle)

    def close(self) -> None:
        """Release the live artifact, if any."""
        self._release()
        self._locked = False
        self._state = RecordingState.idle
