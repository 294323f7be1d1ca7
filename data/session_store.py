"""Typed wrapper around st.session_state for the open document session."""

import streamlit as st
from typing import Optional

from engine.session import DocumentSession
from models.record import CompanyDocument


def initialize_session_state():
    """Initialize all session state keys with defaults."""
    defaults = {
        "document_session": None,
        "data_loaded": False,
    }
    for key, default in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = default


# --- Getters ---

def get_session() -> Optional[DocumentSession]:
    return st.session_state.get("document_session")


def is_data_loaded() -> bool:
    return st.session_state.get("data_loaded", False)


# --- Document lifecycle ---

def open_document(document: CompanyDocument) -> DocumentSession:
    """Close any open session and start a fresh one bound to `document`."""
    close_document()
    session = DocumentSession(document)
    st.session_state["document_session"] = session
    st.session_state["data_loaded"] = True
    return session


def close_document():
    session = get_session()
    if session is not None:
        session.close()
    st.session_state["document_session"] = None
    st.session_state["data_loaded"] = False
