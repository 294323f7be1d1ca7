"""Tests for the linear undo/redo history."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from engine.actions import DelegateAction
from engine.history import LinearHistory


def make_action(name, log):
    return DelegateAction(
        name,
        lambda: log.append(("apply", name)),
        lambda: log.append(("unapply", name)),
    )


class TestUndoRedo:
    def test_round_trip_restores_stacks_in_order(self):
        log = []
        history = LinearHistory()
        actions = [make_action(n, log) for n in ("a1", "a2", "a3")]
        for a in actions:
            history.record(a)

        for _ in actions:
            assert history.undo()
        assert log == [("unapply", "a3"), ("unapply", "a2"), ("unapply", "a1")]
        assert history.redo_history == ["a1", "a2", "a3"]

        log.clear()
        for _ in actions:
            assert history.redo()
        assert log == [("apply", "a1"), ("apply", "a2"), ("apply", "a3")]
        assert history.undo_history == ["a3", "a2", "a1"]
        assert history.redo_history == []

    def test_empty_stacks_are_noops(self):
        history = LinearHistory()
        assert history.undo() is False
        assert history.redo() is False
        assert not history.can_undo
        assert not history.can_redo

    def test_record_discards_redo_branch(self):
        log = []
        history = LinearHistory()
        history.record(make_action("a", log))
        history.record(make_action("b", log))
        history.undo()
        assert history.can_redo

        history.record(make_action("c", log))
        assert not history.can_redo
        assert history.redo() is False
        assert history.undo_history == ["c", "a"]

    def test_end_to_end_scenario(self):
        log = []
        history = LinearHistory()
        a = make_action("rename X", log)
        b = make_action("delete Y", log)
        history.record(a)
        history.record(b)

        assert history.undo()
        assert log[-1] == ("unapply", "delete Y")
        assert history.can_undo and history.can_redo

        assert history.undo()
        assert log[-1] == ("unapply", "rename X")
        assert not history.can_undo

        assert history.redo()
        assert log[-1] == ("apply", "rename X")

        history.record(make_action("C", log))
        calls = len(log)
        assert history.redo() is False
        assert len(log) == calls

    def test_descriptions(self):
        log = []
        history = LinearHistory()
        assert history.undo_description is None
        history.record(make_action("first", log))
        history.record(make_action("second", log))
        history.undo()
        assert history.undo_description == "first"
        assert history.redo_description == "second"
        assert history.undo_count == 1
        assert history.redo_count == 1

    def test_undo_multiple_stops_when_empty(self):
        log = []
        history = LinearHistory()
        history.record(make_action("a", log))
        history.record(make_action("b", log))
        assert history.undo_multiple(5) == 2
        assert history.redo_multiple(1) == 1
        assert history.undo_history == ["a"]

    def test_failing_unapply_keeps_action(self):
        def boom():
            raise RuntimeError("cannot undo")

        history = LinearHistory()
        history.record(DelegateAction("broken", lambda: None, boom))
        with pytest.raises(RuntimeError):
            history.undo()
        assert history.undo_count == 1
        assert history.redo_count == 0


class TestRemoveFromUndoStack:
    def test_removes_mid_stack_entry(self):
        log = []
        history = LinearHistory()
        a, b, c = (make_action(n, log) for n in "abc")
        for action in (a, b, c):
            history.record(action)

        assert history.remove_from_undo_stack(b)
        assert history.undo_history == ["c", "a"]
        assert log == []

    def test_absent_action_is_noop(self):
        log = []
        history = LinearHistory()
        a = make_action("a", log)
        history.record(a)
        assert history.remove_from_undo_stack(make_action("other", log)) is False
        assert history.undo_history == ["a"]

    def test_removes_exactly_one_entry(self):
        log = []
        history = LinearHistory()
        a = make_action("a", log)
        b = make_action("b", log)
        history.record(a)
        history.record(b)
        history.record(a)

        history.remove_from_undo_stack(a)
        assert history.undo_history == ["b", "a"]

    def test_restore_keeps_redo_branch(self):
        log = []
        history = LinearHistory()
        a = make_action("a", log)
        b = make_action("b", log)
        history.record(a)
        history.record(b)
        history.undo()
        history.remove_from_undo_stack(a)

        history.restore(a)
        assert history.undo_history == ["a"]
        assert history.redo_history == ["b"]


class TestHistoryLimitsAndState:
    def test_trims_oldest_beyond_max_size(self):
        log = []
        history = LinearHistory(max_history_size=2)
        for n in ("a", "b", "c"):
            history.record(make_action(n, log))
        assert history.undo_history == ["c", "b"]

    def test_saved_state_tracking(self):
        log = []
        history = LinearHistory()
        assert history.is_at_saved_state
        history.record(make_action("a", log))
        history.mark_saved()
        assert history.is_at_saved_state

        history.record(make_action("b", log))
        assert not history.is_at_saved_state
        history.undo()
        assert history.is_at_saved_state

    def test_observers_and_unsubscribe(self):
        log = []
        seen = []
        history = LinearHistory()
        unsubscribe = history.subscribe(lambda change: seen.append(change.kind))

        history.record(make_action("a", log))
        history.undo()
        history.redo()
        unsubscribe()
        history.clear()
        assert seen == ["record", "undo", "redo"]

    def test_record_during_undo_is_ignored(self):
        history = LinearHistory()
        nested = DelegateAction("nested", lambda: None, lambda: None)
        outer = DelegateAction("outer", lambda: None, lambda: history.record(nested))
        history.record(outer)

        history.undo()
        assert history.undo_count == 0
        assert history.redo_history == ["outer"]

    def test_clear(self):
        log = []
        history = LinearHistory()
        history.record(make_action("a", log))
        history.record(make_action("b", log))
        history.undo()
        history.clear()
        assert not history.can_undo
        assert not history.can_redo


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
