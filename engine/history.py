"""Linear undo/redo history: the LIFO stack pair behind Ctrl+Z / Ctrl+Y."""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from config.defaults import MAX_HISTORY_SIZE
from engine.actions import ReversibleAction

logger = logging.getLogger(__name__)


@dataclass
class HistoryChange:
    kind: str                                 # "record", "undo", "redo", "remove", "restore", "clear", "saved"
    action: Optional[ReversibleAction] = None


HistoryObserver = Callable[[HistoryChange], None]


class LinearHistory:
    """Two stacks of reversible actions, most recent last.

    Recording a new action always discards the redo branch. Undo and redo on an
    empty stack are silent no-ops returning False. Calls made from inside an
    action's own apply/unapply are ignored.
    """

    def __init__(self, max_history_size: int = MAX_HISTORY_SIZE):
        self.max_history_size = max_history_size
        self._undo_stack: List[ReversibleAction] = []
        self._redo_stack: List[ReversibleAction] = []
        self._observers: List[HistoryObserver] = []
        self._saved_action: Optional[ReversibleAction] = None
        self._executing = False

    # --- Queries ---

    @property
    def can_undo(self) -> bool:
        return bool(self._undo_stack)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo_stack)

    @property
    def undo_count(self) -> int:
        return len(self._undo_stack)

    @property
    def redo_count(self) -> int:
        return len(self._redo_stack)

    @property
    def undo_description(self) -> Optional[str]:
        return self._undo_stack[-1].description if self._undo_stack else None

    @property
    def redo_description(self) -> Optional[str]:
        return self._redo_stack[-1].description if self._redo_stack else None

    @property
    def undo_history(self) -> List[str]:
        """Undo stack descriptions, most recent first."""
        return [a.description for a in reversed(self._undo_stack)]

    @property
    def redo_history(self) -> List[str]:
        """Redo stack descriptions, most recent first."""
        return [a.description for a in reversed(self._redo_stack)]

    @property
    def undo_actions(self) -> List[ReversibleAction]:
        return list(reversed(self._undo_stack))

    @property
    def redo_actions(self) -> List[ReversibleAction]:
        return list(reversed(self._redo_stack))

    @property
    def is_at_saved_state(self) -> bool:
        top = self._undo_stack[-1] if self._undo_stack else None
        return top is self._saved_action

    def contains(self, action: ReversibleAction) -> bool:
        return _index_by_identity(self._undo_stack, action) is not None

    def in_redo_stack(self, action: ReversibleAction) -> bool:
        return _index_by_identity(self._redo_stack, action) is not None

    # --- Mutations ---

    def record(self, action: ReversibleAction):
        """Push an already-applied action; the redo branch is discarded."""
        if self._executing:
            logger.debug("Ignoring record of %r during undo/redo", action.description)
            return
        self._undo_stack.append(action)
        self._redo_stack.clear()
        self._trim()
        logger.debug("Recorded %r (%d undoable)", action.description, len(self._undo_stack))
        self._notify(HistoryChange("record", action))

    def undo(self) -> bool:
        if not self._undo_stack or self._executing:
            return False
        action = self._undo_stack[-1]
        self._run(action.unapply)
        self._undo_stack.pop()
        self._redo_stack.append(action)
        logger.info("Undo: %s", action.description)
        self._notify(HistoryChange("undo", action))
        return True

    def redo(self) -> bool:
        if not self._redo_stack or self._executing:
            return False
        action = self._redo_stack[-1]
        self._run(action.apply)
        self._redo_stack.pop()
        self._undo_stack.append(action)
        logger.info("Redo: %s", action.description)
        self._notify(HistoryChange("redo", action))
        return True

    def undo_multiple(self, count: int) -> int:
        """Undo up to `count` steps; returns how many were undone."""
        done = 0
        while done < count and self.undo():
            done += 1
        return done

    def redo_multiple(self, count: int) -> int:
        done = 0
        while done < count and self.redo():
            done += 1
        return done

    def remove_from_undo_stack(self, action: ReversibleAction) -> bool:
        """Remove one specific entry from anywhere in the undo stack.

        This is the one sanctioned break from LIFO order, used when an audit
        event is undone out of order. Relative order of the rest is preserved.
        """
        idx = _index_by_identity(self._undo_stack, action)
        if idx is None:
            return False
        del self._undo_stack[idx]
        self._notify(HistoryChange("remove", action))
        return True

    def remove_from_redo_stack(self, action: ReversibleAction) -> bool:
        idx = _index_by_identity(self._redo_stack, action)
        if idx is None:
            return False
        del self._redo_stack[idx]
        self._notify(HistoryChange("remove", action))
        return True

    def restore(self, action: ReversibleAction):
        """Put an action back on top of the undo stack, keeping the redo branch."""
        if self.contains(action):
            return
        self._undo_stack.append(action)
        self._trim()
        self._notify(HistoryChange("restore", action))

    def mark_saved(self):
        self._saved_action = self._undo_stack[-1] if self._undo_stack else None
        self._notify(HistoryChange("saved"))

    def clear(self):
        self._undo_stack.clear()
        self._redo_stack.clear()
        self._saved_action = None
        self._notify(HistoryChange("clear"))

    # --- Observers ---

    def subscribe(self, callback: HistoryObserver) -> Callable[[], None]:
        """Register a change callback; returns a function that unregisters it."""
        self._observers.append(callback)

        def unsubscribe():
            if callback in self._observers:
                self._observers.remove(callback)

        return unsubscribe

    # --- Internals ---

    def _run(self, fn: Callable[[], None]):
        self._executing = True
        try:
            fn()
        finally:
            self._executing = False

    def _trim(self):
        excess = len(self._undo_stack) - self.max_history_size
        if excess > 0:
            dropped = self._undo_stack[:excess]
            del self._undo_stack[:excess]
            logger.debug("Trimmed %d oldest history entries", len(dropped))

    def _notify(self, change: HistoryChange):
        for callback in list(self._observers):
            callback(change)


def _index_by_identity(stack: List[ReversibleAction], action: ReversibleAction) -> Optional[int]:
    # Search from the top: the most recent matching entry is the one removed
    for i in range(len(stack) - 1, -1, -1):
        if stack[i] is action:
            return i
    return None
