from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Path, Response, status

from ..errors import StorageError, TodoNotFoundError
from ..repositories import TodoRepository, get_repository
from ..schemas import ErrorOut, TodoCreate, TodoOut, TodoUpdate
from ..utils import parse_todo_id

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "Todo not found"

router = APIRouter(
    prefix="/todos",
    tags=["todos"],
)

_not_found = {404: {"model": ErrorOut, "description": "The todo was not found"}}
_server_error = {500: {"model": ErrorOut, "description": "The todo data file could not be read or written"}}


def _get_repo(repo: TodoRepository = Depends(get_repository)) -> TodoRepository:
    """
    Dependency wrapper for repository to keep signatures clean.
    """
    return repo


def _not_found_error() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND_MESSAGE)


def _storage_failure(message: str, exc: StorageError) -> HTTPException:
    logger.error("%s: %s", message, exc, exc_info=exc)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=message)


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=List[TodoOut],
    summary="List Todos",
    description="Returns all todos in the order they were created.",
    responses={200: {"description": "The list of todos"}, **_server_error},
)
def list_todos(repo: TodoRepository = Depends(_get_repo)) -> List[TodoOut]:
    """
    List every todo in stored order.
    """
    try:
        items = repo.list_all()
    except StorageError as e:
        raise _storage_failure("Failed to read todos", e) from e
    return [TodoOut(**it) for it in items]  # type: ignore[arg-type]


# PUBLIC_INTERFACE
@router.get(
    "/{todo_id}",
    response_model=TodoOut,
    summary="Get Todo",
    description="Get a todo by id.",
    responses={200: {"description": "The todo description by id"}, **_not_found, **_server_error},
)
def get_todo(todo_id: str = Path(..., description="The todo id"), repo: TodoRepository = Depends(_get_repo)) -> TodoOut:
    """
    Retrieve a single todo by its id.
    """
    try:
        item = repo.get(parse_todo_id(todo_id))
    except TodoNotFoundError as e:
        raise _not_found_error() from e
    except StorageError as e:
        raise _storage_failure("Failed to read todo", e) from e
    return TodoOut(**item)  # type: ignore[arg-type]


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=TodoOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create Todo",
    description="Create a new todo. The id, completion flag and creation date are assigned by the server.",
    responses={201: {"description": "The created todo"}, **_server_error},
)
def create_todo(payload: TodoCreate, repo: TodoRepository = Depends(_get_repo)) -> TodoOut:
    """
    Create a new todo.
    """
    try:
        created = repo.create(payload)
    except StorageError as e:
        raise _storage_failure("Failed to create todo", e) from e
    return TodoOut(**created)  # type: ignore[arg-type]


# PUBLIC_INTERFACE
@router.put(
    "/{todo_id}",
    response_model=TodoOut,
    summary="Update Todo",
    description="Update the provided fields of a todo. The id cannot be changed.",
    responses={200: {"description": "The updated todo"}, **_not_found, **_server_error},
)
def update_todo(
    payload: TodoUpdate,
    todo_id: str = Path(..., description="The todo id"),
    repo: TodoRepository = Depends(_get_repo),
) -> TodoOut:
    """
    Partial update of a todo; omitted fields keep their stored values.
    """
    try:
        updated = repo.update(parse_todo_id(todo_id), payload)
    except TodoNotFoundError as e:
        raise _not_found_error() from e
    except StorageError as e:
        raise _storage_failure("Failed to update todo", e) from e
    return TodoOut(**updated)  # type: ignore[arg-type]


# PUBLIC_INTERFACE
@router.delete(
    "/{todo_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete Todo",
    description="Delete a todo by id.",
    responses={204: {"description": "Todo deleted successfully"}, **_not_found, **_server_error},
)
def delete_todo(todo_id: str = Path(..., description="The todo id"), repo: TodoRepository = Depends(_get_repo)) -> Response:
    """
    Delete a todo. Returns 204 on success, 404 if not found.
    """
    try:
        repo.delete(parse_todo_id(todo_id))
    except TodoNotFoundError as e:
        raise _not_found_error() from e
    except StorageError as e:
        raise _storage_failure("Failed to delete todo", e) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)
