"""Enum-based state machine for the task edit form.

idle → editing (start_new / start_edit) → submitting (submit) → idle on
success. A failed submit keeps the entered fields and returns to editing
with an error notification. cancel() drops an editing form back to idle.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from core.errors import TaskError
from verticals.tasks.client import TaskClient
from verticals.tasks.models.schemas import TaskResponse, TaskStatus
from verticals.tasks.view_state import Notification, TaskBoard


# ---------------------------------------------------------------------------
# State definitions
# ---------------------------------------------------------------------------

class FormState(str, Enum):
    IDLE = "idle"
    EDITING = "editing"
    SUBMITTING = "submitting"


# Allowed transitions: {current_state: [allowed_next_states]}
_FORM_TRANSITIONS: dict[FormState, list[FormState]] = {
    FormState.IDLE: [FormState.EDITING],
    FormState.EDITING: [FormState.EDITING, FormState.SUBMITTING, FormState.IDLE],
    FormState.SUBMITTING: [FormState.IDLE, FormState.EDITING],
}


@dataclass
class FormTransition:
    """Record of a single state transition."""

    from_state: str
    to_state: str
    timestamp: datetime


# ---------------------------------------------------------------------------
# Form
# ---------------------------------------------------------------------------

@dataclass
class TaskForm:
    """Fields and lifecycle of the create/update form.

    ``editing_id`` is None in new-task mode. Usage::

        form = TaskForm()
        form.start_new()
        form.title = "Buy milk"
        await form.submit(client, board)
    """

    state: FormState = FormState.IDLE
    editing_id: Optional[int] = None
    title: str = ""
    description: str = ""
    status: TaskStatus = TaskStatus.TODO
    notifications: list[Notification] = field(default_factory=list)
    history: list[FormTransition] = field(default_factory=list)

    def can_transition(self, to_state: FormState) -> bool:
        return to_state in _FORM_TRANSITIONS.get(self.state, [])

    def _transition(self, to_state: FormState) -> None:
        if not self.can_transition(to_state):
            allowed = [s.value for s in _FORM_TRANSITIONS.get(self.state, [])]
            raise ValueError(
                f"Cannot transition from {self.state.value} to {to_state.value}. "
                f"Allowed: {allowed}"
            )
        self.history.append(
            FormTransition(
                from_state=self.state.value,
                to_state=to_state.value,
                timestamp=datetime.now(timezone.utc),
            )
        )
        self.state = to_state

    def _clear_fields(self) -> None:
        self.editing_id = None
        self.title = ""
        self.description = ""
        self.status = TaskStatus.TODO

    def _notify(self, message: str, level: str = "success") -> None:
        self.notifications.append(Notification(message, level))

    @property
    def is_new(self) -> bool:
        return self.editing_id is None

    # -- Transitions --

    def start_new(self) -> None:
        """Open the form for a new task: empty fields, status todo."""
        self._transition(FormState.EDITING)
        self._clear_fields()

    def start_edit(self, task: TaskResponse) -> None:
        """Open the form populated from an existing task."""
        self._transition(FormState.EDITING)
        self.editing_id = task.id
        self.title = task.title or ""
        self.description = task.description or ""
        self.status = task.normalized_status

    def cancel(self) -> None:
        self._transition(FormState.IDLE)
        self._clear_fields()

    async def submit(
        self, client: TaskClient, board: TaskBoard | None = None
    ) -> TaskResponse | None:
        """Send the form. Returns the saved task, or None on failure.

        An empty title never leaves the client: the form stays in editing
        with an error notification.
        """
        if self.state != FormState.EDITING:
            raise ValueError(f"Cannot submit from {self.state.value}")

        if not self.title.strip():
            self._notify("Please enter a task title", "error")
            return None

        self._transition(FormState.SUBMITTING)
        try:
            if self.is_new:
                saved = await client.create_task(self.title, self.description)
            else:
                saved = await client.update_task(
                    self.editing_id,
                    self.title,
                    self.description,
                    status=self.status,
                )
        except TaskError:
            self._transition(FormState.EDITING)
            self._notify("Failed to save task", "error")
            return None

        self._notify("Task added" if self.is_new else "Task updated")
        self._transition(FormState.IDLE)
        self._clear_fields()
        if board is not None:
            await board.refresh(client)
        return saved
