"""Tab 2: Version History, grouped audit timeline with selective undo/redo."""

import streamlit as st

from components.metrics_cards import render_metric_row
from components.tables import render_audit_table
from config.defaults import ACTION_FILTERS
from engine.timeline_view import build_timeline


def render(sidebar_state):
    """Render the Version History tab."""
    st.header("Version History")

    session = sidebar_state.session
    if session is None:
        st.info("Open a document from the sidebar to see its history.")
        return

    timeline = session.timeline

    col_query, col_action, col_type = st.columns([2, 1, 1])
    with col_query:
        query = st.text_input("Search history", key="history_query")
    with col_action:
        action = st.selectbox("Action", ACTION_FILTERS, key="history_action")
    with col_type:
        entity_types = ["All"] + timeline.get_entity_types()
        entity_type = st.selectbox("Entity type", entity_types, key="history_entity_type")

    view = build_timeline(timeline, query=query, action_filter=action, entity_type_filter=entity_type)

    render_metric_row([
        {"label": "Events", "value": view.total_count},
        {"label": "Shown", "value": view.filtered_count},
        {"label": "Undo Stack", "value": session.history.undo_count},
        {"label": "Redo Stack", "value": session.history.redo_count},
    ])

    if view.total_count == 0:
        st.info("No changes recorded yet.")
        return
    if view.show_no_results:
        st.warning("No events match the current filters.")

    for group in view.groups:
        st.subheader(group.label)
        for item in group.items:
            event = item.event
            col_time, col_desc, col_btn = st.columns([1, 5, 1])
            col_time.caption(item.time_text)
            text = f"~~{event.description}~~" if event.is_undone else event.description
            col_desc.markdown(f"**{event.action.value}** · {text}")
            for field_name, change in event.changes.items():
                col_desc.caption(f"{field_name}: '{change.old_value}' → '{change.new_value}'")
            for meta in item.sub_items:
                col_desc.caption(f"↳ {meta.action.value} at {meta.timestamp.astimezone().strftime('%I:%M %p')}")
            with col_btn:
                if item.can_undo and st.button("Undo", key=f"undo_{event.event_id}"):
                    if session.undo_event(event):
                        st.rerun()
                    else:
                        st.error(f"Could not undo '{event.description}'.")
                if item.can_redo and st.button("Redo", key=f"redo_{event.event_id}"):
                    if session.redo_event(event):
                        st.rerun()
                    else:
                        st.error(f"Could not redo '{event.description}'.")

    st.divider()
    st.subheader("Audit Log")
    audit_df = timeline.to_frame().iloc[::-1]
    render_audit_table(audit_df)
    csv = audit_df.to_csv(index=False)
    st.download_button("Export Audit Log (CSV)", csv, "audit_log.csv", "text/csv")
