"""Local playback of the live artifact through the default output device."""

import logging
from abc import ABC, abstractmethod
from pathlib import Path

import soundfile as sf

logger = logging.getLogger(__name__)


class BasePlayer(ABC):
    """Interface for anything that can play an artifact's scratch file."""

    @abstractmethod
    def play(self, path: Path) -> None:
        """Start playing the audio file at ``path`` without blocking."""

    @abstractmethod
    def stop(self) -> None:
        """Stop playback if any is running."""

    @property
    def active(self) -> bool:
        """Whether audio is still being played."""
        return False


class SoundDevicePlayer(BasePlayer):
    """Plays audio files with ``sounddevice.play`` (non-blocking)."""

    def play(self, path: Path) -> None:
        import sounddevice as sd

        data, sample_rate = sf.read(str(path), dtype="float32")
        sd.play(data, sample_rate)
        logger.debug("Playing %s (%d Hz)", path, sample_rate)

    def stop(self) -> None:
        import sounddevice as sd

        sd.stop()

    @property
    def active(self) -> bool:
        import sounddevice as sd

        try:
            return sd.get_stream().active
        except RuntimeError:
            # No stream has been started yet
            return False


class NullPlayer(BasePlayer):
    """Player for surfaces that render their own audio widget."""

    def play(self, path: Path) -> None:
        logger.debug("Playback of %s delegated to the presentation layer", path)

    def stop(self) -> None:
        pass
