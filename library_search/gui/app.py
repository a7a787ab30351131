"""
Streamlit reference page for the library searcher.

Lets the user pick books, submit a query, and watch results arrive
while the background scan runs. Built only on the public core API.

Note: This file is run directly by Streamlit, so it needs to
set up the Python path before importing other modules.
"""

import sys
from pathlib import Path

# Add project root to path for imports when run directly by Streamlit
_project_root = Path(__file__).parent.parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

import streamlit as st  # noqa: E402
from typing import List, Tuple  # noqa: E402

from library_search.core import get_config, get_logger, AccessError  # noqa: E402
from library_search.corpus import BookScanner, order_selection  # noqa: E402
from library_search.search import SearchResult  # noqa: E402
from library_search.utils import truncate_text  # noqa: E402
from library_search.gui.result_view import open_unit  # noqa: E402

from library_search.gui.state import (  # noqa: E402
    init_state,
    get_state,
    set_state,
    get_controller,
    get_result_view,
    drain_events,
    clear_search_state,
)

logger = get_logger(__name__)

ADDRESS_LABEL_CHARS = 120


def render_sidebar(library_directory: Path) -> List[str]:
    """
    Render the book selection sidebar.

    Returns:
        Selected book paths, in library order.
    """
    with st.sidebar:
        st.title("Books to search")

        books = BookScanner(library_directory).scan()
        names = {book.path: book.display_name for book in books}

        if not books:
            st.warning(f"No books found in {library_directory}")
            return []

        select_all = st.checkbox("Select all", value=False)
        previous = [path for path in get_state("selected_books", []) if path in names]

        selected = st.multiselect(
            "Books",
            options=list(names),
            default=list(names) if select_all else previous,
            format_func=names.get,
            label_visibility="collapsed"
        )
        set_state("selected_books", selected)

        st.caption(f"{len(selected)} of {len(books)} books selected")

    return order_selection(books, selected)


def render_search_form() -> Tuple[str, bool]:
    """
    Render the query input with search and cancel buttons.

    Returns:
        Tuple of (query_text, was_submitted).
    """
    controller = get_controller()

    with st.form("search_form", clear_on_submit=False):
        col1, col2 = st.columns([5, 1])

        with col1:
            query = st.text_input(
                "Search",
                value=get_state("search_query", ""),
                placeholder="Type the text and press Enter",
                label_visibility="collapsed"
            )

        with col2:
            submitted = st.form_submit_button(
                "Search",
                type="primary",
                use_container_width=True
            )

    col1, col2 = st.columns(2)

    with col1:
        if st.button("Stop", disabled=not controller.is_running, use_container_width=True):
            controller.cancel()

    with col2:
        if st.button("Clear", use_container_width=True):
            clear_search_state()
            st.rerun()

    return query, submitted


def render_live_results() -> None:
    """Render progress, then the result rows updated from drained sink events."""
    controller = get_controller()
    config = get_config()

    view = get_result_view()
    new_results = view.apply(drain_events())
    if new_results:
        logger.debug(f"Rendering {new_results} new results")

    state = controller.sink.state
    results = view.rows

    if state.started_at is None:
        st.info("Select books in the sidebar and enter a query to start.")
        return

    st.progress(
        state.progress,
        text=f"Scanned {state.current_book_ordinal} of {state.total_books} books"
    )

    if state.is_searching:
        st.caption(f"Searching... {len(results)} results so far")
    elif state.elapsed_seconds is not None:
        status = "Stopped" if state.cancelled else "Finished"
        st.caption(
            f"{status}: scanned {state.current_book_ordinal} of {state.total_books} books, "
            f"{len(results)} results in {state.elapsed_seconds:.1f} seconds"
        )

    if state.skipped_books:
        with st.expander(f"{len(state.skipped_books)} books could not be read"):
            for path in state.skipped_books:
                st.text(path)

    if not results:
        if state.is_complete:
            st.info(f"No results for \"{state.query}\"")
        return

    limit = config.gui.max_rendered_results
    for idx, result in enumerate(results[:limit]):
        _render_result(result, idx)

    if len(results) > limit:
        st.caption(f"Showing the first {limit} of {len(results)} results")


def _render_result(result: SearchResult, idx: int) -> None:
    """Render one result with a preview of its line."""
    with st.expander(f"**{truncate_text(result.address, ADDRESS_LABEL_CHARS)}**", expanded=False):
        st.markdown(result.snippet.replace(result.query, f"**{result.query}**"))

        show_unit = get_state("show_unit", {})
        if st.button("Show paragraph", key=f"unit_btn_{idx}"):
            show_unit[idx] = not show_unit.get(idx, False)
            set_state("show_unit", show_unit)

        if show_unit.get(idx, False):
            try:
                st.text(open_unit(get_controller().accessor, result))
            except AccessError as e:
                st.error(f"Cannot open book: {e.message}")

        st.caption(f"{result.book_path} - line {result.book_index + 1}")


def main():
    """Main application entry point."""
    config = get_config()

    st.set_page_config(
        page_title=config.gui.page_title,
        layout="wide",
        initial_sidebar_state="expanded"
    )

    init_state()

    selection = render_sidebar(config.paths.library_directory)

    st.title(config.gui.page_title)

    query, submitted = render_search_form()

    if submitted:
        set_state("search_query", query)
        set_state("show_unit", {})
        get_controller().start_search(query, selection)

    st.divider()

    st.fragment(run_every=config.gui.refresh_interval_seconds)(render_live_results)()


if __name__ == "__main__":
    main()
