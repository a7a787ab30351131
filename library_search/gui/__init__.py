"""
GUI module providing the Streamlit reference page.

Contains the page, the session state helpers that keep a scan
controller alive across reruns, and the result rows the page renders.
"""

from .result_view import ResultView, open_unit
from .state import init_state, get_state, set_state, get_controller, get_result_view

__all__ = [
    "ResultView",
    "open_unit",
    "init_state",
    "get_state",
    "set_state",
    "get_controller",
    "get_result_view"
]
