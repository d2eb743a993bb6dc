"""End-to-end flow: record -> stop -> play -> search -> re-rank.

Runs the whole orchestrator against the in-memory retrieval service with
only the PortAudio recorder mocked out.
"""

import io

import soundfile as sf

from songscout.core.models import RankingDimension, RecordingState
from songscout.services.search import display_score, rank_label


async def test_record_search_and_rerank(orchestrator, service, notifier):
    service.rankings = [
        [
            service.rank("b", 0.5, 60, 950),
            service.rank("a", 0.9, 80, 900),
            service.rank("gone", 0.99, 99, 999),
        ]
    ]
    service.add_song("a", title="Alpha")
    service.add_song("b", title="Bravo")

    # Record a take
    assert await orchestrator.start_capture()
    artifact = await orchestrator.stop_capture()
    assert orchestrator.state == RecordingState.ready
    _, sample_rate = sf.read(io.BytesIO(artifact.data))
    assert sample_rate == 44100

    orchestrator.play()
    assert orchestrator.state == RecordingState.playing
    scratch = orchestrator.artifact_path

    # Search
    candidates = await orchestrator.submit()

    assert orchestrator.state == RecordingState.idle
    assert not scratch.exists()
    assert service.uploads and artifact.data in service.uploads[0]
    assert sorted(service.song_requests) == ["a", "b", "gone"]
    assert [c.title for c in candidates] == ["Bravo", "Alpha"]
    assert candidates[0].thumbnail_url == "https://img.example/b.jpg"
    notifier.notify.assert_not_called()

    # Default view shows server order with the final score
    rows = [
        (rank_label(i), display_score(c, orchestrator.dimension))
        for i, c in enumerate(orchestrator.results)
    ]
    assert rows == [("#1", "0.950"), ("#2", "0.900")]

    # Re-rank by text score without touching the network
    request_count = len(service.requests)
    orchestrator.set_ranking_dimension(RankingDimension.text)
    rows = [
        (c.title, display_score(c, orchestrator.dimension)) for c in orchestrator.results
    ]
    assert rows == [("Alpha", "0.800"), ("Bravo", "0.600")]
    assert len(service.requests) == request_count


async def test_dimension_survives_next_search(orchestrator, service, artifact):
    service.rankings = [
        [service.rank("a", 0.9, 10, 900)],
        [service.rank("x", 0.1, 90, 990), service.rank("y", 0.2, 20, 980)],
    ]
    for song_id in ("a", "x", "y"):
        service.add_song(song_id)

    orchestrator.upload_file(artifact.data, artifact.name, artifact.media_type)
    await orchestrator.submit()
    orchestrator.set_ranking_dimension("audio")

    orchestrator.upload_file(artifact.data, artifact.name, artifact.media_type)
    await orchestrator.submit()

    assert orchestrator.dimension == RankingDimension.audio
    assert [c.song_id for c in orchestrator.results] == ["y", "x"]
