"""
Task lifecycle: validation and date policy for create, update, complete
and delete. The only caller of the recurrence calculator.
"""
import logging
from datetime import date
from typing import Protocol

from errors import MissingTitle
from models import Task
from nextdate import RepeatRule, format_date, next_date, parse_date, parse_repeat

logger = logging.getLogger(__name__)

LIST_LIMIT = 25


class TaskStore(Protocol):
    def create(self, task: Task) -> int: ...

    def get(self, task_id: int) -> Task: ...

    def update(self, task: Task) -> None: ...

    def delete(self, task_id: int) -> None: ...

    def list_all(self, limit: int | None = None) -> list[Task]: ...


class TaskLifecycle:
    def __init__(self, store: TaskStore):
        self._store = store

    def _validate(self, task: Task) -> RepeatRule:
        if not task.title:
            logger.debug("Rejected task without title")
            raise MissingTitle()
        return parse_repeat(task.repeat)

    def create_task(self, task: Task, now: date) -> int:
        """
        Validate and store a new task.
        A missing date becomes today. A past date is clamped to today for
        one-off tasks and moved to the next occurrence for repeating ones.
        """
        rule = self._validate(task)
        today = format_date(now)

        if not task.date:
            task = task.model_copy(update={"date": today})
        elif parse_date(task.date) < now:
            new_date = next_date(now, task.date, rule) if rule else today
            task = task.model_copy(update={"date": new_date})

        task_id = self._store.create(task)
        logger.info("Created task id=%s date=%s repeat=%r", task_id, task.date, task.repeat)
        return task_id

    def get_task(self, task_id: int) -> Task:
        return self._store.get(task_id)

    def list_tasks(self, limit: int = LIST_LIMIT) -> list[Task]:
        return self._store.list_all(max(0, min(limit, LIST_LIMIT)))

    def update_task(self, task: Task) -> None:
        """Replace a task's fields. Past dates are kept as given."""
        self._validate(task)
        parse_date(task.date)
        self._store.update(task)
        logger.info("Updated task id=%s", task.id)

    def complete_task(self, task_id: int, now: date) -> None:
        """One-off tasks are deleted, repeating tasks move to their next occurrence."""
        task = self._store.get(task_id)
        rule = parse_repeat(task.repeat)
        if not rule:
            self._store.delete(task_id)
            logger.info("Completed one-off task id=%s, deleted", task_id)
            return

        new_date = next_date(now, task.date, rule)
        self._store.update(task.model_copy(update={"date": new_date}))
        logger.info("Completed task id=%s, next date %s", task_id, new_date)

    def delete_task(self, task_id: int) -> None:
        self._store.delete(task_id)
        logger.info("Deleted task id=%s", task_id)

    @staticmethod
    def compute_next_date(now: date, anchor: str, repeat: str) -> str:
        return next_date(now, anchor, repeat)
