"""
Streamlit session state management.

Provides helpers for initializing, reading, and updating session state,
and holds the per-session scan controller and its event queue.
"""

import queue

import streamlit as st
from typing import Any, List

from ..search import ScanController, SinkEvent
from .result_view import ResultView


DEFAULT_STATE = {
    "search_query": "",
    "selected_books": [],
    "show_unit": {},
}


def init_state() -> None:
    """
    Initialize session state with default values.

    Only sets values that don't already exist, preserving
    state across reruns.
    """
    for key, default_value in DEFAULT_STATE.items():
        if key not in st.session_state:
            st.session_state[key] = default_value


def get_state(key: str, default: Any = None) -> Any:
    """
    Get a value from session state.

    Args:
        key: State key to retrieve.
        default: Default value if key doesn't exist.

    Returns:
        The stored value or default.
    """
    return st.session_state.get(key, default)


def set_state(key: str, value: Any) -> None:
    """
    Set a value in session state.

    Args:
        key: State key to set.
        value: Value to store.
    """
    st.session_state[key] = value


def get_controller() -> ScanController:
    """
    Get the scan controller of this browser session, creating it on first use.

    The controller outlives reruns so a scan keeps running while the
    page refreshes.
    """
    if "controller" not in st.session_state:
        controller = ScanController()
        events, _ = controller.sink.subscribe_queue()
        st.session_state["controller"] = controller
        st.session_state["events"] = events
        st.session_state["result_view"] = ResultView(controller.sink)

    return st.session_state["controller"]


def get_result_view() -> ResultView:
    """Result rows kept for this session; apply drained events before rendering."""
    get_controller()
    return st.session_state["result_view"]


def drain_events() -> List[SinkEvent]:
    """Take every sink event published since the last call."""
    events = st.session_state.get("events")
    drained = []

    if events is None:
        return drained

    while True:
        try:
            drained.append(events.get_nowait())
        except queue.Empty:
            return drained


def clear_search_state() -> None:
    """Stop any running scan and reset search-related state."""
    get_controller().clear()
    get_result_view().apply(drain_events())
    set_state("search_query", "")
    set_state("show_unit", {})
