"""UI utility functions."""

import asyncio
from collections.abc import Coroutine
from typing import Any, TypeVar

import streamlit as st

T = TypeVar("T")

_LOOP_KEY = "_event_loop"


def run_async(coro: Coroutine[Any, Any, T]) -> T:
    """Run a coroutine on the session's persistent event loop.

    The orchestrator's HTTP client is bound to the loop it was first used
    on, so every script run must reuse the same loop rather than calling
    ``asyncio.run``.
    """
    loop = st.session_state.get(_LOOP_KEY)
    if loop is None or loop.is_closed():
        loop = asyncio.new_event_loop()
        st.session_state[_LOOP_KEY] = loop
    return loop.run_until_complete(coro)
