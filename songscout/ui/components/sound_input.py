"""
Sound input panel — record, upload, play, download and search buttons.

Buttons only forward intents to the orchestrator; the panel re-renders
from orchestrator state on the next script run.
"""

import streamlit as st

from songscout.core.models import RecordingState
from songscout.services.orchestrator import SearchOrchestrator
from songscout.ui.utils import run_async

SEARCH_REQUESTED_KEY = "_search_requested"


def _render_record_button(orchestrator: SearchOrchestrator, disabled: bool) -> None:
    if orchestrator.state == RecordingState.recording:
        if st.button("⏹ Stop", type="primary", use_container_width=True):
            run_async(orchestrator.stop_capture())
            st.rerun()
    elif st.button("🎤 Record", disabled=disabled, use_container_width=True):
        run_async(orchestrator.start_capture())
        st.rerun()


def _render_upload(orchestrator: SearchOrchestrator, disabled: bool) -> None:
    uploaded = st.file_uploader(
        "Upload",
        type=["mp3", "wav", "ogg", "flac", "m4a", "webm"],
        disabled=disabled or orchestrator.state == RecordingState.recording,
        label_visibility="collapsed",
    )
    # The uploader keeps returning the same file on every run; only ingest it once
    if uploaded is not None and uploaded.file_id != st.session_state.get("_uploaded_file_id"):
        st.session_state["_uploaded_file_id"] = uploaded.file_id
        orchestrator.upload_file(uploaded.getvalue(), uploaded.name, uploaded.type)
        st.rerun()


def _render_playback(orchestrator: SearchOrchestrator) -> None:
    artifact = orchestrator.artifact
    if artifact is None:
        return

    col1, col2 = st.columns(2)
    with col1:
        if orchestrator.state == RecordingState.playing:
            if st.button("⏸ Pause", use_container_width=True):
                orchestrator.pause()
                st.rerun()
        elif st.button("▶ Play", use_container_width=True):
            orchestrator.play()
            st.rerun()
    with col2:
        st.download_button(
            "⬇ Download",
            data=artifact.data,
            file_name=artifact.name,
            mime=artifact.media_type,
            use_container_width=True,
        )


def render_sound_input(orchestrator: SearchOrchestrator) -> None:
    """Render the sound input card."""
    searching = orchestrator.searching or st.session_state.get(SEARCH_REQUESTED_KEY, False)

    with st.container(border=True):
        st.subheader("Sound input")
        col1, col2 = st.columns(2)
        with col1:
            _render_record_button(orchestrator, disabled=searching)
        with col2:
            _render_upload(orchestrator, disabled=searching)

        _render_playback(orchestrator)

        label = "Searching..." if searching else "🔍 Search"
        if st.button(
            label,
            type="primary",
            disabled=searching or orchestrator.state not in (
                RecordingState.ready,
                RecordingState.playing,
            ),
            use_container_width=True,
        ):
            st.session_state[SEARCH_REQUESTED_KEY] = True
            st.rerun()
