"""
Search result display components.

Provides the ranked-by selector, skeleton placeholders shown while a
search runs, and one card per candidate.
"""

import streamlit as st

from songscout.core.models import Candidate, RankingDimension
from songscout.services.orchestrator import SearchOrchestrator
from songscout.services.search.ranking import display_score, rank_label, score_label

SKELETON_COUNT = 12

_DIMENSION_LABELS = {
    RankingDimension.final: "Final Score",
    RankingDimension.audio: "Audio Score",
    RankingDimension.text: "Text Score",
}


def render_skeletons(count: int = SKELETON_COUNT) -> None:
    """Placeholder cards shown while results are loading."""
    for _ in range(count):
        with st.container(border=True, height=120):
            st.caption("Searching...")


def render_candidate(index: int, candidate: Candidate, dimension: RankingDimension) -> None:
    """Render one ranked result card."""
    with st.container(border=True):
        st.markdown(
            f"**{rank_label(index)}** {score_label(dimension)}: "
            f"*{display_score(candidate, dimension)}*"
        )
        col1, col2 = st.columns([1, 5])
        with col1:
            if candidate.thumbnail_url:
                st.image(candidate.thumbnail_url, width=96)
        with col2:
            if candidate.url:
                st.markdown(f"[{candidate.title}]({candidate.url})")
            else:
                st.markdown(candidate.title)


def render_ranking_select(orchestrator: SearchOrchestrator) -> None:
    options = list(RankingDimension)
    selected = st.selectbox(
        "Ranked by",
        options,
        index=options.index(orchestrator.dimension),
        format_func=lambda d: _DIMENSION_LABELS[d],
    )
    if orchestrator.set_ranking_dimension(selected):
        st.rerun()


def render_results(orchestrator: SearchOrchestrator) -> None:
    """Render the results card from the orchestrator's ranking view."""
    with st.container(border=True):
        col1, col2 = st.columns([2, 1])
        with col1:
            st.subheader("Search results")
        with col2:
            render_ranking_select(orchestrator)

        if orchestrator.loading:
            render_skeletons()
            return

        dimension = orchestrator.dimension
        for index, candidate in enumerate(orchestrator.results):
            render_candidate(index, candidate, dimension)
