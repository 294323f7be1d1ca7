"""Version history view model: date groups, nested undo/redo entries, search."""

from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, tzinfo
from typing import List, Optional, Sequence

from config.defaults import (
    DATE_FORMAT_LONG, DATE_FORMAT_SHORT, ENTITY_TYPE_ALL, TIME_FORMAT,
)
from engine.relevance import rank
from engine.timeline import AuditTimeline
from models.audit import AuditAction, AuditEvent


@dataclass
class DateGroup:
    day: date
    label: str
    events: List[AuditEvent] = field(default_factory=list)


@dataclass
class TimelineItem:
    event: AuditEvent
    time_text: str
    can_undo: bool
    can_redo: bool
    sub_items: List[AuditEvent] = field(default_factory=list)   # Undone/Redone meta-events, oldest first


@dataclass
class TimelineGroup:
    day: date
    label: str
    items: List[TimelineItem] = field(default_factory=list)


@dataclass
class TimelineView:
    groups: List[TimelineGroup]
    total_count: int
    filtered_count: int
    is_filtered: bool
    entity_types: List[str]

    @property
    def show_no_results(self) -> bool:
        return self.total_count > 0 and self.is_filtered and self.filtered_count == 0


def local_date(ts: datetime, tz: Optional[tzinfo] = None) -> date:
    return ts.astimezone(tz).date()


def date_label(day: date, today: date) -> str:
    if day == today:
        return f"Today, {day.strftime(DATE_FORMAT_SHORT)}"
    if day == today - timedelta(days=1):
        return f"Yesterday, {day.strftime(DATE_FORMAT_SHORT)}"
    return day.strftime(DATE_FORMAT_LONG)


def group_by_date(
    events: Sequence[AuditEvent],
    today: Optional[date] = None,
    tz: Optional[tzinfo] = None,
    keep_order: bool = False,
) -> List[DateGroup]:
    """Group events by local calendar date.

    By default groups run newest day first and events newest first within a
    day. With keep_order the incoming order (e.g. search ranking) is kept and
    groups appear in order of first occurrence.
    """
    if today is None:
        today = datetime.now(tz).date()
    if not keep_order:
        # Reversed first so equal timestamps still come out newest-inserted first
        events = sorted(reversed(list(events)), key=lambda e: e.timestamp, reverse=True)

    groups: "OrderedDict[date, DateGroup]" = OrderedDict()
    for event in events:
        day = local_date(event.timestamp, tz)
        if day not in groups:
            groups[day] = DateGroup(day=day, label=date_label(day, today))
        groups[day].events.append(event)
    return list(groups.values())


def build_timeline(
    timeline: AuditTimeline,
    query: str = "",
    action_filter: Optional[str] = None,
    entity_type_filter: Optional[str] = None,
    today: Optional[date] = None,
    tz: Optional[tzinfo] = None,
) -> TimelineView:
    """Assemble the version history view from the timeline's current state.

    action_filter takes the menu labels: "All"/None, "Added", "Modified",
    "Deleted", or "Undone" (events currently undone). Meta-events never appear
    as rows; they are attached to the event they refer to.
    """
    if entity_type_filter == ENTITY_TYPE_ALL:
        entity_type_filter = None
    events = timeline.get_filtered_events(entity_type_filter=entity_type_filter)
    primary = [e for e in events if not e.is_meta]

    if action_filter == "Undone":
        primary = [e for e in primary if e.is_undone]
    elif action_filter not in (None, "", "All"):
        wanted = AuditAction(action_filter)
        primary = [e for e in primary if e.action == wanted]

    searching = bool((query or "").strip())
    if searching:
        primary = rank(
            primary,
            query,
            fields=lambda e: [e.description, e.entity_name, e.entity_type],
            default_key=lambda e: e.timestamp,
            reverse_default=True,
        )

    groups = []
    for date_group in group_by_date(primary, today=today, tz=tz, keep_order=searching):
        group = TimelineGroup(day=date_group.day, label=date_group.label)
        for event in date_group.events:
            group.items.append(TimelineItem(
                event=event,
                time_text=event.timestamp.astimezone(tz).strftime(TIME_FORMAT),
                can_undo=timeline.can_undo_event(event),
                can_redo=timeline.can_redo_event(event),
                sub_items=timeline.meta_events_for(event),
            ))
        groups.append(group)

    total = sum(1 for e in timeline.events if not e.is_meta)
    return TimelineView(
        groups=groups,
        total_count=total,
        filtered_count=len(primary),
        is_filtered=bool(searching or entity_type_filter or action_filter not in (None, "", "All")),
        entity_types=[ENTITY_TYPE_ALL] + timeline.get_entity_types(),
    )
