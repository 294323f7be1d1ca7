"""Tab 1: Records, searchable list with add, edit and delete."""

import streamlit as st

from components.tables import render_styled_table
from config.defaults import ENTITY_TYPES
from engine.list_filter import filter_records_frame


def render(sidebar_state):
    """Render the Records tab."""
    st.header("Records")

    session = sidebar_state.session
    if session is None:
        st.info("Open a document from the sidebar to get started.")
        return

    col_type, col_query = st.columns([1, 3])
    with col_type:
        entity_type = st.selectbox("Type", ["All"] + ENTITY_TYPES, key="records_type")
    with col_query:
        query = st.text_input("Search", key="records_query", placeholder="Name, email, phone or ID")

    visible = filter_records_frame(session.document.records, query, entity_type)
    st.caption(f"{len(visible)} of {len(session.document.records)} records")
    render_styled_table(visible)

    st.divider()

    # --- Add ---
    with st.expander("Add Record", expanded=False):
        new_type = st.selectbox("Type", ENTITY_TYPES, key="add_type")
        new_name = st.text_input("Name", key="add_name")
        new_email = st.text_input("Email", key="add_email")
        new_phone = st.text_input("Phone", key="add_phone")
        if st.button("Add", type="primary", key="btn_add"):
            if not new_name:
                st.warning("Please enter a name.")
            else:
                session.add_record(new_type, new_name, email=new_email, phone=new_phone)
                st.rerun()

    if visible.empty:
        return

    # --- Edit / Delete ---
    selected_id = st.selectbox(
        "Select record",
        visible["ID"].tolist(),
        format_func=lambda rid: f"{rid} — {session.document.find(rid).name}",
        key="records_selected",
    )
    selected = session.document.find(selected_id)

    col_edit, col_delete = st.columns(2)
    with col_edit:
        with st.form(f"edit_{selected_id}"):
            name = st.text_input("Name", value=selected.name)
            email = st.text_input("Email", value=selected.email)
            phone = st.text_input("Phone", value=selected.phone)
            notes = st.text_area("Notes", value=selected.notes)
            if st.form_submit_button("Save Changes"):
                try:
                    session.edit_record(selected_id, name=name, email=email, phone=phone, notes=notes)
                    st.rerun()
                except KeyError as e:
                    st.error(f"Error saving record: {e}")

    with col_delete:
        confirmed = st.checkbox(f"Yes, delete '{selected.name}'", key=f"confirm_delete_{selected_id}")
        if st.button("Delete Record", type="secondary", key="btn_delete"):
            if session.delete_record(selected_id, confirm=lambda: confirmed):
                st.rerun()
            else:
                st.warning("Tick the confirmation box to delete this record.")
