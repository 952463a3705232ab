from pydantic import BaseModel, field_validator

from errors import InvalidTaskId

# SQLite INTEGER is a signed 64-bit value
MAX_TASK_ID = 2 ** 63 - 1


def task_id_from_str(raw) -> int:
    try:
        task_id = int(raw)
    except (TypeError, ValueError):
        raise InvalidTaskId(raw) from None
    if abs(task_id) > MAX_TASK_ID:
        raise InvalidTaskId(raw)
    return task_id


class Task(BaseModel):
    id: int = 0  # assigned by the store on create
    date: str = ""  # YYYYMMDD
    title: str = ""
    comment: str = ""
    repeat: str = ""  # "", "d <n>" or "y"


class TaskCreate(BaseModel):
    date: str = ""
    title: str = ""
    comment: str = ""
    repeat: str = ""

    def to_task(self) -> Task:
        return Task(**self.model_dump())


class TaskUpdate(TaskCreate):
    id: str  # the web client sends ids as strings

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value):
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    def to_task(self) -> Task:
        return Task(id=task_id_from_str(self.id), date=self.date, title=self.title, comment=self.comment, repeat=self.repeat)


class TaskOut(BaseModel):
    id: str
    date: str
    title: str
    comment: str
    repeat: str

    @classmethod
    def from_task(cls, task: Task) -> "TaskOut":
        return cls(id=str(task.id), date=task.date, title=task.title, comment=task.comment, repeat=task.repeat)


class TaskList(BaseModel):
    tasks: list[TaskOut]


class TaskCreated(BaseModel):
    id: int
