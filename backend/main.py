from contextlib import asynccontextmanager
from datetime import date
import logging
from pathlib import Path
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.staticfiles import StaticFiles

from config import Settings, load_settings
from database import SqliteTaskStore, init_db
from errors import EmptyRepeatRule, MissingParameter, SchedulerError
from lifecycle import TaskLifecycle
from logging_setup import setup_logging
from models import TaskCreate, TaskCreated, TaskList, TaskOut, TaskUpdate, task_id_from_str
from nextdate import parse_date

logger = logging.getLogger(__name__)


def get_today() -> date:
    return date.today()


def get_lifecycle(request: Request) -> TaskLifecycle:
    return request.app.state.lifecycle


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or load_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        init_db(settings.db_file)
        app.state.lifecycle = TaskLifecycle(SqliteTaskStore(settings.db_file))
        yield
        # Shutdown (nothing to do)

    app = FastAPI(lifespan=lifespan)
    app.state.settings = settings

    @app.exception_handler(SchedulerError)
    async def scheduler_error_handler(_request: Request, exc: SchedulerError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("Request failed: %s", exc.message)
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(EmptyRepeatRule)
    async def empty_rule_handler(_request: Request, exc: EmptyRepeatRule) -> JSONResponse:
        return JSONResponse(status_code=400, content={"error": str(exc)})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.debug("Invalid request payload: %s", exc.errors())
        return JSONResponse(status_code=400, content={"error": "invalid request payload"})

    @app.get("/api/nextdate", response_class=PlainTextResponse)
    def next_date_endpoint(
        now: Optional[str] = None,
        date: Optional[str] = None,
        repeat: Optional[str] = None,
    ) -> str:
        """Preview the next occurrence of a repeat rule."""
        if not (now and date and repeat):
            raise MissingParameter("parameters now, date and repeat are required")
        return TaskLifecycle.compute_next_date(parse_date(now), date, repeat)

    @app.get("/api/tasks")
    def list_tasks(lifecycle: TaskLifecycle = Depends(get_lifecycle)) -> TaskList:
        return TaskList(tasks=[TaskOut.from_task(task) for task in lifecycle.list_tasks()])

    @app.post("/api/task", status_code=201)
    def create_task(
        task_data: TaskCreate,
        lifecycle: TaskLifecycle = Depends(get_lifecycle),
        today: date = Depends(get_today),
    ) -> TaskCreated:
        return TaskCreated(id=lifecycle.create_task(task_data.to_task(), today))

    @app.get("/api/task")
    def get_task(id: Optional[str] = None, lifecycle: TaskLifecycle = Depends(get_lifecycle)) -> TaskOut:
        return TaskOut.from_task(lifecycle.get_task(task_id_from_str(id)))

    @app.put("/api/task")
    def update_task(task_data: TaskUpdate, lifecycle: TaskLifecycle = Depends(get_lifecycle)) -> dict:
        lifecycle.update_task(task_data.to_task())
        return {}

    @app.post("/api/task/done")
    def complete_task(
        id: Optional[str] = None,
        lifecycle: TaskLifecycle = Depends(get_lifecycle),
        today: date = Depends(get_today),
    ) -> dict:
        lifecycle.complete_task(task_id_from_str(id), today)
        return {}

    @app.delete("/api/task")
    def delete_task(id: Optional[str] = None, lifecycle: TaskLifecycle = Depends(get_lifecycle)) -> dict:
        lifecycle.delete_task(task_id_from_str(id))
        return {}

    # Frontend is served from the web directory, mounted last so /api routes win
    web_dir = Path(settings.web_dir)
    if web_dir.is_dir():
        app.mount("/", StaticFiles(directory=web_dir, html=True), name="web")
    else:
        logger.warning("Web directory %s not found, serving API only", web_dir)

    return app


def run() -> None:
    import uvicorn

    settings = load_settings()
    setup_logging(settings.log_level)
    logger.info("Starting server on %s:%s", settings.host, settings.port)
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


app = create_app()

if __name__ == "__main__":
    run()
