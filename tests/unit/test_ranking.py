"""Tests for RankingView and the score display helpers."""

import pytest

from songscout.core.models import Candidate, RankingDimension
from songscout.services.search import (
    RankingView,
    display_score,
    rank_candidates,
    rank_label,
    score_label,
)


def _candidate(song_id, audio, text, final) -> Candidate:
    return Candidate(
        song_id=song_id,
        title=f"Song {song_id}",
        audioScore=audio,
        textScore=text,
        finalScore=final,
    )


@pytest.fixture
def candidates():
    # Server order: a, b, c
    return [
        _candidate("a", audio=0.9, text=80, final=900),
        _candidate("b", audio=0.5, text=60, final=950),
        _candidate("c", audio=0.7, text=95, final=400),
    ]


@pytest.fixture
def view(candidates):
    v = RankingView()
    v.replace(candidates)
    return v


def _ids(view_or_seq) -> list[str]:
    seq = view_or_seq.candidates if isinstance(view_or_seq, RankingView) else view_or_seq
    return [c.song_id for c in seq]


class TestReplace:
    def test_keeps_server_order_for_default_dimension(self, view):
        assert view.dimension == RankingDimension.final
        assert _ids(view) == ["a", "b", "c"]

    def test_applies_active_non_default_dimension(self, candidates):
        view = RankingView()
        view.set_dimension(RankingDimension.audio)

        view.replace(candidates)

        assert _ids(view) == ["a", "c", "b"]

    def test_replace_discards_previous_results(self, view):
        view.replace([_candidate("z", 0.1, 1, 1)])
        assert _ids(view) == ["z"]


class TestSetDimension:
    """Verify in-place re-sorting by score dimension."""

    def test_text_dimension_orders_by_text_score(self):
        """finalScore [900, 950] with textScore [80, 60]: text puts the 80 first."""
        view = RankingView()
        view.replace(
            [_candidate("b", 0.5, 60, 950), _candidate("a", 0.9, 80, 900)]
        )

        changed = view.set_dimension("text")

        assert changed is True
        assert view.dimension == RankingDimension.text
        assert _ids(view) == ["a", "b"]

    def test_audio_dimension(self, view):
        view.set_dimension(RankingDimension.audio)
        assert _ids(view) == ["a", "c", "b"]

    def test_back_to_final(self, view):
        view.set_dimension(RankingDimension.text)
        view.set_dimension(RankingDimension.final)
        assert _ids(view) == ["b", "a", "c"]

    def test_same_dimension_is_noop(self, view):
        before = view.candidates

        assert view.set_dimension(RankingDimension.final) is False
        assert view.candidates is before

    def test_unknown_dimension_rejected(self, view):
        with pytest.raises(ValueError):
            view.set_dimension("popularity")

    def test_does_not_touch_loading_state(self, view):
        view.set_dimension(RankingDimension.text)
        assert view.loading is False


class TestRankCandidates:
    @pytest.mark.parametrize("dimension", list(RankingDimension))
    def test_idempotent(self, candidates, dimension):
        once = rank_candidates(candidates, dimension)
        twice = rank_candidates(once, dimension)
        assert _ids(once) == _ids(twice)

    def test_stable_for_ties(self):
        tied = [
            _candidate("x", 0.5, 50, 500),
            _candidate("y", 0.5, 50, 500),
            _candidate("z", 0.9, 50, 500),
        ]
        assert _ids(rank_candidates(tied, RankingDimension.audio)) == ["z", "x", "y"]
        assert _ids(rank_candidates(tied, RankingDimension.text)) == ["x", "y", "z"]

    def test_input_not_mutated(self, candidates):
        rank_candidates(candidates, RankingDimension.text)
        assert _ids(candidates) == ["a", "b", "c"]


class TestLoadingState:
    def test_clear_empties_and_marks_loading(self, view):
        view.clear()
        assert len(view) == 0
        assert view.loading is True

    def test_replace_settles(self, view, candidates):
        view.clear()
        view.replace(candidates)
        assert view.loading is False

    def test_settle_without_results(self, view):
        view.clear()
        view.settle()
        assert view.loading is False
        assert view.candidates == ()


class TestDisplay:
    """Final and text scores are scaled down before formatting; audio is not."""

    def test_final_score_divided_by_1000(self):
        assert display_score(_candidate("a", 0.9, 80, 900), RankingDimension.final) == "0.900"

    def test_text_score_divided_by_100(self):
        assert display_score(_candidate("a", 0.9, 80, 900), RankingDimension.text) == "0.800"

    def test_audio_score_unscaled(self):
        assert display_score(_candidate("a", 0.91234, 80, 900), RankingDimension.audio) == "0.912"

    def test_three_decimals(self):
        assert display_score(_candidate("a", 1, 7, 1234.4), RankingDimension.final) == "1.234"

    def test_labels(self):
        assert score_label(RankingDimension.final) == "Final score"
        assert score_label(RankingDimension.audio) == "Audio score"
        assert score_label(RankingDimension.text) == "Text score"
        assert rank_label(0) == "#1"
        assert rank_label(9) == "#10"
