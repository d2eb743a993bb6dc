"""Shared pytest fixtures for the SongScout test suite.

Provides sample audio, a fake retrieval service served through
``httpx.MockTransport``, and factories for the orchestration components.
"""

import asyncio
import io
import math
import struct
import wave
from collections import defaultdict
from unittest.mock import MagicMock

import httpx
import numpy as np
import pytest

from songscout.core.config import get_settings
from songscout.core.models import ArtifactOrigin, AudioArtifact
from songscout.services.capture import CaptureSource, MicrophoneRecorder
from songscout.services.notifications import BaseNotifier
from songscout.services.orchestrator import SearchOrchestrator
from songscout.services.search import RetrievalClient
from songscout.services.session import RecordingSession

BASE_URL = "http://retrieval.test"


@pytest.fixture(autouse=True)
def _fresh_settings():
    """Make every test read settings from a clean cache."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# ---------------------------------------------------------------------------
# Audio Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def sample_wav_bytes():
    """0.1 seconds of a 440Hz stereo sine wave as 16-bit 44.1kHz WAV bytes."""
    sample_rate = 44100
    frames = []
    for i in range(sample_rate // 10):
        value = int(12000 * math.sin(2 * math.pi * 440.0 * i / sample_rate))
        frames.append(struct.pack("<hh", value, value))

    buf = io.BytesIO()
    with wave.open(buf, "wb") as wf:
        wf.setnchannels(2)
        wf.setsampwidth(2)
        wf.setframerate(sample_rate)
        wf.writeframes(b"".join(frames))
    return buf.getvalue()


@pytest.fixture
def artifact(sample_wav_bytes):
    return AudioArtifact(
        data=sample_wav_bytes,
        media_type="audio/wav",
        name="clip.wav",
        origin=ArtifactOrigin.upload,
    )


@pytest.fixture
def recorder():
    """A MicrophoneRecorder stand-in that yields 0.1s of quiet stereo noise."""
    rec = MagicMock(spec=MicrophoneRecorder)
    rng = np.random.default_rng(0)
    rec.stop.return_value = (rng.uniform(-0.2, 0.2, size=(4410, 2))).astype(np.float32)
    return rec


@pytest.fixture
def recorder_factory(recorder):
    return MagicMock(return_value=recorder)


@pytest.fixture
def capture(recorder_factory):
    return CaptureSource(recorder_factory=recorder_factory)


# ---------------------------------------------------------------------------
# Fake retrieval service
# ---------------------------------------------------------------------------


class FakeRetrievalService:
    """In-memory retrieval service speaking the /results and /song/{id} protocol.

    Attributes:
        rankings: Ranked lists returned by successive POST /results calls
            (the last one is reused once the list is exhausted).
        songs: Song detail objects keyed by song id; unknown ids get a 404.
        results_status: Status code for POST /results.
        results_body: Raw JSON body overriding the ranked-list envelope.
        gates: Song ids whose detail response waits until the event is set.
        arrived: Set when a detail request for the song id reaches the service.
    """

    def __init__(self) -> None:
        self.rankings: list[list[dict]] = [[]]
        self.songs: dict[str, dict] = {}
        self.results_status = 200
        self.results_body = None
        self.gates: dict[str, asyncio.Event] = {}
        self.arrived: defaultdict[str, asyncio.Event] = defaultdict(asyncio.Event)
        self.requests: list[httpx.Request] = []
        self.uploads: list[bytes] = []
        self._posts = 0

    @staticmethod
    def rank(song_id, score_audio, score_text, synthesized_score) -> dict:
        return {
            "song_id": song_id,
            "score_audio": score_audio,
            "score_text": score_text,
            "synthesized_score": synthesized_score,
        }

    def add_song(self, song_id, title=None) -> dict:
        detail = {
            "id": song_id,
            "title": title or f"Song {song_id}",
            "url": f"https://music.example/watch?v={song_id}",
            "thumbnails": [{"url": f"https://img.example/{song_id}.jpg", "width": 120}],
        }
        self.songs[song_id] = detail
        return detail

    @property
    def song_requests(self) -> list[str]:
        return [r.url.path.rsplit("/", 1)[-1] for r in self.requests if r.method == "GET"]

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if request.method == "POST" and path == "/results":
            self.uploads.append(await request.aread())
            ranking = self.rankings[min(self._posts, len(self.rankings) - 1)]
            self._posts += 1
            if self.results_status != 200:
                return httpx.Response(self.results_status, json={"detail": "boom"})
            body = self.results_body if self.results_body is not None else {
                "result": {"result": ranking}
            }
            return httpx.Response(200, json=body)

        if request.method == "GET" and path.startswith("/song/"):
            song_id = path.rsplit("/", 1)[-1]
            self.arrived[song_id].set()
            if song_id in self.gates:
                await self.gates[song_id].wait()
            detail = self.songs.get(song_id)
            if detail is None:
                return httpx.Response(404, json={"detail": "not found"})
            return httpx.Response(200, json={"result": {"result": detail}})

        return httpx.Response(404)


@pytest.fixture
def service():
    return FakeRetrievalService()


@pytest.fixture
async def client(service):
    c = RetrievalClient(
        base_url=BASE_URL,
        max_attempts=1,
        retry_wait=0,
        transport=httpx.MockTransport(service.handler),
    )
    yield c
    await c.aclose()


@pytest.fixture
def notifier():
    return MagicMock(spec=BaseNotifier)


@pytest.fixture
def session(tmp_path):
    s = RecordingSession(scratch_dir=tmp_path / "scratch")
    yield s
    s.close()


@pytest.fixture
def orchestrator(client, capture, notifier, session):
    return SearchOrchestrator(client=client, capture=capture, notifier=notifier, session=session)
