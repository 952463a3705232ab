"""
Error identities raised by the scheduler core.

Each error carries a stable ``code`` and the HTTP status the API layer
answers with, so callers never need to parse messages.
"""


class SchedulerError(Exception):
    code = "scheduler_error"
    status_code = 500

    def __init__(self, message: str = ""):
        super().__init__(message or self.code)
        self.message = message or self.code


class MissingTitle(SchedulerError):
    code = "missing_title"
    status_code = 400

    def __init__(self, message: str = "task title is required"):
        super().__init__(message)


class InvalidDateFormat(SchedulerError):
    code = "invalid_date_format"
    status_code = 400

    def __init__(self, value: str):
        super().__init__(f'incorrect date: "{value}"')
        self.value = value


class InvalidRuleFormat(SchedulerError):
    code = "invalid_rule_format"
    status_code = 400

    def __init__(self, value: str):
        super().__init__(f'incorrect repeat format: "{value}"')
        self.value = value


class TaskNotFound(SchedulerError):
    code = "task_not_found"
    status_code = 404

    def __init__(self, task_id: int):
        super().__init__(f"task {task_id} not found")
        self.task_id = task_id


class StorageFailure(SchedulerError):
    code = "storage_failure"
    status_code = 500


class EmptyRepeatRule(ValueError):
    """Raised when next_date is asked to advance a task that does not repeat."""


class InvalidTaskId(SchedulerError):
    code = "invalid_task_id"
    status_code = 400

    def __init__(self, value):
        super().__init__(f"invalid task id: {value!r}" if value else "task id is required")
        self.value = value


class MissingParameter(SchedulerError):
    code = "missing_parameter"
    status_code = 400
