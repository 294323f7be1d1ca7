"""Global sidebar: document controls and Ctrl+Z / Ctrl+Y style undo/redo."""

import streamlit as st
from dataclasses import dataclass
from typing import Optional

from data.sample_data import generate_sample_document
from data.session_store import close_document, get_session, is_data_loaded, open_document
from engine.session import DocumentSession


@dataclass
class SidebarState:
    session: Optional[DocumentSession]


def _render_history_menu(label: str, entries: list, key: str) -> Optional[int]:
    """Show a history list; return how many steps to take if the user picks one."""
    if not entries:
        st.caption(f"{label}: nothing")
        return None
    choice = st.selectbox(
        label,
        options=list(range(len(entries))),
        format_func=lambda i: entries[i],
        key=key,
    )
    if st.button(f"{label} to here", key=f"{key}_btn"):
        return choice + 1
    return None


def render_sidebar() -> SidebarState:
    """Render the global sidebar controls and return current state."""
    with st.sidebar:
        st.title("Bookkeeping History")
        st.divider()

        col_open, col_close = st.columns(2)
        with col_open:
            if st.button("Open Sample", key="sidebar_open"):
                open_document(generate_sample_document())
                st.rerun()
        with col_close:
            if st.button("Close", key="sidebar_close", disabled=not is_data_loaded()):
                close_document()
                st.rerun()

        session = get_session()
        if session is None:
            st.warning("No document open")
            return SidebarState(session=None)

        history = session.history
        st.success(f"Open: {session.document.name}")
        if session.has_unsaved_changes:
            st.caption("Unsaved changes")
            if st.button("Mark Saved", key="sidebar_saved"):
                session.mark_saved()
                st.rerun()

        st.divider()
        col_undo, col_redo = st.columns(2)
        with col_undo:
            undo_help = f"Undo {history.undo_description}" if history.can_undo else None
            if st.button("Undo", key="sidebar_undo", disabled=not history.can_undo, help=undo_help):
                session.undo()
                st.rerun()
        with col_redo:
            redo_help = f"Redo {history.redo_description}" if history.can_redo else None
            if st.button("Redo", key="sidebar_redo", disabled=not history.can_redo, help=redo_help):
                session.redo()
                st.rerun()

        steps = _render_history_menu("Undo", history.undo_history, "sidebar_undo_menu")
        if steps:
            history.undo_multiple(steps)
            st.rerun()
        steps = _render_history_menu("Redo", history.redo_history, "sidebar_redo_menu")
        if steps:
            history.redo_multiple(steps)
            st.rerun()

    return SidebarState(session=session)
