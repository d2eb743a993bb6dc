"""
Search module - Retrieval client, submission pipeline and ranking view.
"""

from .client import RetrievalClient, parse_ranked_entries, parse_song_detail
from .pipeline import SearchPipeline
from .ranking import RankingView, display_score, rank_candidates, rank_label, score_label

__all__ = [
    "RankingView",
    "RetrievalClient",
    "SearchPipeline",
    "display_score",
    "parse_ranked_entries",
    "parse_song_detail",
    "rank_candidates",
    "rank_label",
    "score_label",
]
