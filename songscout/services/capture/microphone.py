"""Microphone recording on top of a PortAudio input stream.

A ``MicrophoneRecorder`` owns exactly one ``sounddevice.InputStream``.
The PortAudio callback thread only appends blocks to a lock-protected
buffer; everything else happens on the caller's thread.
"""

import io
import logging
import threading
from dataclasses import dataclass

import numpy as np
import soundfile as sf

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CaptureParameters:
    """Fixed microphone constraints used for every recording."""

    channels: int = 2
    sample_rate: int = 44100
    block_size: int = 16384
    dtype: str = "float32"
    noise_suppression: bool = True
    echo_cancellation: bool = False
    auto_gain_control: bool = True


DEFAULT_CAPTURE_PARAMETERS = CaptureParameters()

# Peak level that auto-gain normalises a recording to
_TARGET_PEAK = 0.9


class MicrophoneRecorder:
    """Scoped owner of one input stream and the audio it buffers.

    Args:
        params: Capture constraints (channels, rate, block size, processing flags).
        device: PortAudio device name or index; ``None`` selects the default input.

    Raises:
        sounddevice.PortAudioError: If the device cannot be opened.
    """

    def __init__(
        self,
        params: CaptureParameters = DEFAULT_CAPTURE_PARAMETERS,
        device: str | int | None = None,
    ) -> None:
        # Imported lazily: loading sounddevice initialises PortAudio
        import sounddevice as sd

        self._params = params
        self._blocks: list[np.ndarray] = []
        self._lock = threading.Lock()
        self._closed = False
        self._stream = sd.InputStream(
            samplerate=params.sample_rate,
            channels=params.channels,
            blocksize=params.block_size,
            dtype=params.dtype,
            device=device,
            callback=self._on_block,
        )
        if params.noise_suppression or params.echo_cancellation:
            logger.debug(
                "Input processing flags (noise_suppression=%s, echo_cancellation=%s) "
                "are left to the host audio stack",
                params.noise_suppression,
                params.echo_cancellation,
            )

    @property
    def params(self) -> CaptureParameters:
        return self._params

    @property
    def closed(self) -> bool:
        return self._closed

    def _on_block(self, indata, frames, time_info, status) -> None:  # noqa: ANN001
        if status:
            logger.debug("Input stream status: %s", status)
        with self._lock:
            self._blocks.append(indata.copy())

    def start(self) -> None:
        """Begin buffering microphone input."""
        self._stream.start()

    def stop(self) -> np.ndarray:
        """Stop the stream and return everything buffered as a (frames, channels) array."""
        if not self._closed:
            self._stream.stop()
        with self._lock:
            blocks, self._blocks = self._blocks, []
        if not blocks:
            return np.zeros((0, self._params.channels), dtype=self._params.dtype)
        return np.concatenate(blocks, axis=0)

    def close(self) -> None:
        """Release the device stream. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        self._stream.close()
        logger.debug("Input stream closed")

    def __enter__(self) -> "MicrophoneRecorder":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def apply_auto_gain(samples: np.ndarray, target_peak: float = _TARGET_PEAK) -> np.ndarray:
    """Scale samples so the loudest one reaches ``target_peak``. Silence is returned as-is."""
    peak = float(np.max(np.abs(samples))) if samples.size else 0.0
    if peak == 0.0:
        return samples
    return (samples * (target_peak / peak)).astype(samples.dtype, copy=False)


def encode_wav(samples: np.ndarray, sample_rate: int) -> bytes:
    """Encode float samples as 16-bit PCM WAV bytes."""
    buf = io.BytesIO()
    sf.write(buf, samples, sample_rate, format="WAV", subtype="PCM_16")
    return buf.getvalue()
