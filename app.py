"""Bookkeeping History: Streamlit entry point."""

import logging
import streamlit as st
import sys
import os

# Add project root to path for imports
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from components.sidebar import render_sidebar
from config.defaults import LOG_LEVEL
from data.session_store import initialize_session_state
from tabs import tab_records, tab_version_history


def main():
    logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    st.set_page_config(
        page_title="Bookkeeping History",
        page_icon="📒",
        layout="wide",
        initial_sidebar_state="expanded",
    )

    initialize_session_state()
    sidebar_state = render_sidebar()

    tab1, tab2 = st.tabs([
        "📋 Records",
        "🕘 Version History",
    ])

    with tab1:
        tab_records.render(sidebar_state)
    with tab2:
        tab_version_history.render(sidebar_state)


if __name__ == "__main__":
    main()
