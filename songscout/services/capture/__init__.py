"""
Capture module - Microphone recording, file uploads and playback.
"""

from .artifact import ArtifactHandle
from .microphone import DEFAULT_CAPTURE_PARAMETERS, CaptureParameters, MicrophoneRecorder
from .playback import BasePlayer, NullPlayer, SoundDevicePlayer
from .source import CaptureSource, is_audio_media_type

__all__ = [
    "ArtifactHandle",
    "BasePlayer",
    "CaptureParameters",
    "CaptureSource",
    "DEFAULT_CAPTURE_PARAMETERS",
    "MicrophoneRecorder",
    "NullPlayer",
    "SoundDevicePlayer",
    "is_audio_media_type",
]
