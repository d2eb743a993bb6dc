"""
SongScout Streamlit UI — main entry point.

Run with: ``streamlit run songscout/ui/app.py``
"""

# ---------------------------------------------------------------------------
# Ensure project root is on sys.path so ``from songscout.xxx`` imports work.
# Streamlit replaces sys.path[0] with the script directory (songscout/ui/),
# which removes the project root needed for absolute imports.
# ---------------------------------------------------------------------------
import sys  # noqa: E402
from pathlib import Path  # noqa: E402

_project_root = str(Path(__file__).resolve().parent.parent.parent)
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

import logging  # noqa: E402

import streamlit as st  # noqa: E402

from songscout.core.config import get_settings  # noqa: E402
from songscout.core.models import RecordingState  # noqa: E402
from songscout.services.capture import SoundDevicePlayer  # noqa: E402
from songscout.services.orchestrator import create_orchestrator  # noqa: E402
from songscout.ui.components.results import render_results, render_skeletons  # noqa: E402
from songscout.ui.components.sound_input import (  # noqa: E402
    SEARCH_REQUESTED_KEY,
    render_sound_input,
)
from songscout.ui.notifier import StreamlitNotifier, flush_notifications  # noqa: E402
from songscout.ui.utils import run_async  # noqa: E402

logging.basicConfig(level=get_settings().log_level.upper())

# ---------------------------------------------------------------------------
# Page config (must be first Streamlit call)
# ---------------------------------------------------------------------------
st.set_page_config(
    page_title="SongScout",
    page_icon="\U0001f3b5",
    layout="wide",
)

# ---------------------------------------------------------------------------
# Session state defaults
# ---------------------------------------------------------------------------
if "orchestrator" not in st.session_state:
    st.session_state.orchestrator = create_orchestrator(
        notifier=StreamlitNotifier(),
        player=SoundDevicePlayer(),
    )

orchestrator = st.session_state.orchestrator
flush_notifications()

# Playback finished on its own since the last run
if orchestrator.state == RecordingState.playing and not orchestrator.player_active:
    orchestrator.playback_ended()

# ---------------------------------------------------------------------------
# Layout
# ---------------------------------------------------------------------------
left, right = st.columns([1, 2])

with left:
    render_sound_input(orchestrator)

with right:
    if st.session_state.pop(SEARCH_REQUESTED_KEY, False):
        # Show placeholders while the search runs, then redraw with results
        with st.container(border=True):
            st.subheader("Search results")
            render_skeletons()
        run_async(orchestrator.submit())
        st.rerun()
    else:
        render_results(orchestrator)
