"""
Capture source — turns a microphone take or a user file into an AudioArtifact.

Microphone usage::

    source = CaptureSource()
    await source.start()
    ...
    artifact = await source.stop()

The recorder is acquired in ``start()`` and released in ``stop()``,
``close()``, or when ``start()`` itself fails.
"""

import asyncio
import logging
import mimetypes
from collections.abc import Callable
from pathlib import Path

from songscout.core.config import get_settings
from songscout.core.exceptions import CaptureError, InvalidTransitionError, ValidationError
from songscout.core.models import ArtifactOrigin, AudioArtifact
from songscout.services.capture.microphone import (
    DEFAULT_CAPTURE_PARAMETERS,
    CaptureParameters,
    MicrophoneRecorder,
    apply_auto_gain,
    encode_wav,
)

logger = logging.getLogger(__name__)

RecorderFactory = Callable[[CaptureParameters, str | int | None], MicrophoneRecorder]

AUDIO_MEDIA_PREFIX = "audio/"
RECORDING_MEDIA_TYPE = "audio/wav"


def is_audio_media_type(media_type: str | None) -> bool:
    """Return True if the declared media type is an ``audio/*`` type."""
    return bool(media_type) and media_type.lower().startswith(AUDIO_MEDIA_PREFIX)


class CaptureSource:
    """Produces audio artifacts from the microphone or from uploaded files.

    Args:
        recorder_factory: Builds a recorder for the given parameters and device.
            Defaults to ``MicrophoneRecorder``.
        params: Capture constraints applied to every recording.
        device: Input device; falls back to ``capture_device`` from settings.
        recording_filename: Name given to recorded artifacts.
    """

    def __init__(
        self,
        recorder_factory: RecorderFactory | None = None,
        params: CaptureParameters = DEFAULT_CAPTURE_PARAMETERS,
        device: str | int | None = None,
        recording_filename: str | None = None,
    ) -> None:
        settings = get_settings()
        self._factory = recorder_factory or MicrophoneRecorder
        self._params = params
        self._device = device if device is not None else settings.capture_device
        self._recording_filename = recording_filename or settings.recording_filename
        self._recorder: MicrophoneRecorder | None = None

    @property
    def is_capturing(self) -> bool:
        return self._recorder is not None

    async def start(self) -> None:
        """Open the microphone and begin buffering.

        Raises:
            InvalidTransitionError: If a capture is already running.
            CaptureError: If the device cannot be opened or started.
        """
        if self._recorder is not None:
            raise InvalidTransitionError("start recording", "recording")

        recorder = None
        try:
            # Opening a PortAudio stream blocks, so keep it off the event loop
            recorder = await asyncio.to_thread(self._factory, self._params, self._device)
            recorder.start()
        except Exception as exc:
            logger.warning("Failed to open microphone (%s): %s", self._device or "default", exc)
            if recorder is not None:
                recorder.close()
            raise CaptureError() from exc

        self._recorder = recorder
        logger.info(
            "Recording started (%d ch, %d Hz)", self._params.channels, self._params.sample_rate
        )

    async def stop(self) -> AudioArtifact:
        """Finalize the running capture into a single WAV artifact.

        The device stream is closed whether or not encoding succeeds.

        Raises:
            InvalidTransitionError: If no capture is running.
            CaptureError: If the buffered audio cannot be read or encoded.
        """
        recorder = self._recorder
        if recorder is None:
            raise InvalidTransitionError("stop recording", "idle")
        self._recorder = None

        try:
            samples = await asyncio.to_thread(recorder.stop)
            if self._params.auto_gain_control:
                samples = apply_auto_gain(samples)
            data = await asyncio.to_thread(encode_wav, samples, self._params.sample_rate)
        except Exception as exc:
            logger.warning("Failed to finalize recording: %s", exc)
            raise CaptureError("Failed to finalize the recording.") from exc
        finally:
            recorder.close()

        logger.info("Recording stopped: %d frames, %d bytes", len(samples), len(data))
        return AudioArtifact(
            data=data,
            media_type=RECORDING_MEDIA_TYPE,
            name=self._recording_filename,
            origin=ArtifactOrigin.microphone,
        )

    def upload(self, data: bytes, name: str, media_type: str | None) -> AudioArtifact:
        """Accept user-provided bytes if they declare an audio media type.

        Raises:
            ValidationError: If ``media_type`` is missing or not ``audio/*``.
        """
        if not is_audio_media_type(media_type):
            logger.info("Rejected upload %r with media type %r", name, media_type)
            raise ValidationError(media_type)
        return AudioArtifact(
            data=data, media_type=media_type, name=name, origin=ArtifactOrigin.upload
        )

    def upload_path(self, path: str | Path) -> AudioArtifact:
        """Upload a local file, guessing its media type from the file name."""
        path = Path(path)
        media_type, _ = mimetypes.guess_type(path.name)
        if not is_audio_media_type(media_type):
            logger.info("Rejected upload %s with media type %r", path, media_type)
            raise ValidationError(media_type)
        return self.upload(path.read_bytes(), path.name, media_type)

    def close(self) -> None:
        """Abandon any running capture and release its device."""
        if self._recorder is not None:
            self._recorder.close()
            self._recorder = None
            logger.info("Recording abandoned")
