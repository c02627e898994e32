"""Pure functions for the fields a todo derives from its other fields."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterable, Mapping, Optional


def round_percent(part: int, whole: int) -> int:
    """Integer percentage of part/whole, rounded half up."""
    if whole <= 0:
        return 0
    return (200 * part + whole) // (2 * whole)


def _is_done(subtask: Any) -> bool:
    if isinstance(subtask, Mapping):
        return bool(subtask.get("completed", False))
    return bool(getattr(subtask, "completed", False))


def compute_progress(subtasks: Optional[Iterable[Any]], completed: bool) -> int:
    """Progress 0..100 from subtasks; with no subtasks it follows the completed flag."""
    items = list(subtasks or [])
    if not items:
        return 100 if completed else 0
    done = sum(1 for s in items if _is_done(s))
    return round_percent(done, len(items))


@dataclass(frozen=True)
class CompletionTransition:
    """Outcome of a change to the completed flag."""
    changed: bool
    completed_at: Optional[datetime] = None
    progress_override: Optional[int] = None


def apply_completion_transition(
    previous_completed: bool,
    new_completed: bool,
    now: datetime,
) -> CompletionTransition:
    """
    false -> true stamps completed_at and forces progress to 100.
    true -> false clears completed_at. No transition touches nothing.
    """
    if previous_completed == new_completed:
        return CompletionTransition(changed=False)
    if new_completed:
        return CompletionTransition(changed=True, completed_at=now, progress_override=100)
    return CompletionTransition(changed=True, completed_at=None, progress_override=None)


def is_overdue(due_date: Optional[datetime], completed: bool, now: datetime) -> bool:
    """A todo is overdue when its due date has passed and it is still open."""
    return due_date is not None and due_date < now and not completed


def fold_case(text: str) -> str:
    return text.casefold()


def search_text(title: Optional[str], description: Optional[str]) -> str:
    """Casefolded title and description, matched by free-text search."""
    return fold_case("\n".join(part for part in (title, description) if part))
