"""Streamlit notification sink.

Notifications are queued in session state and drained as toasts at the
top of the next script run, so messages raised just before ``st.rerun()``
are not lost.
"""

import streamlit as st

from songscout.core.models import Notification, Severity
from songscout.services.notifications import BaseNotifier

_QUEUE_KEY = "pending_notifications"

_ICONS = {
    Severity.default: "✅",
    Severity.destructive: "⚠️",
}


class StreamlitNotifier(BaseNotifier):
    """Queues notifications for display as ``st.toast`` messages."""

    def notify(self, notification: Notification) -> None:
        st.session_state.setdefault(_QUEUE_KEY, []).append(notification)


def flush_notifications() -> None:
    """Show and clear every queued notification."""
    for notification in st.session_state.pop(_QUEUE_KEY, []):
        st.toast(
            f"**{notification.title}**  \n{notification.description}",
            icon=_ICONS[notification.severity],
        )
