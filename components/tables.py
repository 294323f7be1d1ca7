"""Styled dataframe display helpers."""

import streamlit as st
import pandas as pd
from typing import Optional


ACTION_STYLES = {
    "Added": "color: #155724; font-weight: bold",
    "Modified": "color: #856404; font-weight: bold",
    "Deleted": "color: #cc0000; font-weight: bold",
    "Undone": "color: #6c757d; font-style: italic",
    "Redone": "color: #004085; font-style: italic",
}


def render_styled_table(
    df: pd.DataFrame,
    title: Optional[str] = None,
    height: Optional[int] = None,
    use_container_width: bool = True,
):
    """Render a styled, non-editable dataframe."""
    if title:
        st.subheader(title)
    st.dataframe(df, height=height, use_container_width=use_container_width)


def render_audit_table(df: pd.DataFrame, action_column: str = "Action"):
    """Render an audit log table with color-coded action kinds."""
    def color_action(val):
        return ACTION_STYLES.get(val, "")

    if action_column in df.columns:
        styled = df.style.map(color_action, subset=[action_column])
        st.dataframe(styled, use_container_width=True, height=300)
    else:
        st.dataframe(df, use_container_width=True, height=300)
