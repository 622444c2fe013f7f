import logging
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import Settings, get_settings
from app.errors import PersistenceError, TaskValidationError
from app.models import Task, TaskCreate, TaskResponse, TaskUpdate
from app.service import TaskService
from app.storage import TaskStore, build_store

logger = logging.getLogger(__name__)

router = APIRouter()


def get_task_service(request: Request) -> TaskService:
    return request.app.state.task_service


@router.get("/health")
async def health():
    return {"status": "healthy"}


@router.post("/tasks", status_code=201, response_model=TaskResponse)
def create_task(task: TaskCreate, service: TaskService = Depends(get_task_service)):
    created = service.create_task(Task(**task.model_dump()))
    return TaskResponse.from_task(created)


@router.get("/tasks/{task_id}", response_model=TaskResponse)
def get_task(task_id: int, service: TaskService = Depends(get_task_service)):
    task = service.get_task_by_id(task_id)
    if task is None:
        raise HTTPException(status_code=404, detail="Task not found")
    return TaskResponse.from_task(task)


@router.get("/tasks", response_model=List[TaskResponse])
def list_tasks(service: TaskService = Depends(get_task_service)):
    return [TaskResponse.from_task(t) for t in service.get_all_tasks()]


@router.put("/tasks/{task_id}", response_model=TaskResponse)
def update_task(task_id: int, updates: TaskUpdate, service: TaskService = Depends(get_task_service)):
    updated = service.update_task(task_id, updates)
    if updated is None:
        raise HTTPException(status_code=404, detail="Task not found")
    return TaskResponse.from_task(updated)


@router.delete("/tasks/{task_id}", status_code=204)
def delete_task(task_id: int, service: TaskService = Depends(get_task_service)):
    service.delete_task(task_id)


async def _task_validation_failed(request: Request, exc: TaskValidationError):
    return JSONResponse(status_code=422, content={"detail": exc.errors})


async def _persistence_failed(request: Request, exc: PersistenceError):
    # already logged with traceback by the store
    return JSONResponse(status_code=500, content={"detail": "Storage backend error"})


def create_app(settings: Optional[Settings] = None, store: Optional[TaskStore] = None) -> FastAPI:
    """
    Build the application: one store, one TaskService around it.

    The store's schema is created when the application starts up.
    """
    settings = settings or get_settings()
    store = store if store is not None else build_store(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        store.init_schema()
        logger.info("%s started backend=%s", settings.app_name, type(store).__name__)
        yield

    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    app.state.task_service = TaskService(store)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(TaskValidationError, _task_validation_failed)
    app.add_exception_handler(PersistenceError, _persistence_failed)
    app.include_router(router)
    return app


app = create_app()
