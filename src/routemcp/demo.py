"""In-memory Todo API exposed both as REST routes and as MCP tools.

Serve it with::

    routemcp serve routemcp.demo:api            # REST + /api/mcp on :3033
    routemcp serve routemcp.demo:api --stdio    # MCP over stdin/stdout

REST examples::

    GET    /api/todos?done=false
    POST   /api/todos        {"title": "Buy milk"}
    GET    /api/todos/1
    PUT    /api/todos/1      {"title": "Updated", "done": true}
    DELETE /api/todos/1
    GET    /api/search?q=milk&limit=5
"""

from __future__ import annotations

from itertools import count
from typing import Any

from fastapi import HTTPException, Request
from pydantic import BaseModel

from routemcp.routing import RouterWrapper


class Todo(BaseModel):
    id: int
    title: str
    done: bool = False


class TodoCreate(BaseModel):
    title: str = "Untitled"


class TodoUpdate(BaseModel):
    title: str | None = None
    done: bool | None = None


_ids = count(1)
todos: dict[int, Todo] = {}


def _seed() -> None:
    for title, done in (
        ("Learn about MCP", False),
        ("Build an API", True),
        ("Connect an MCP client", False),
    ):
        todo = Todo(id=next(_ids), title=title, done=done)
        todos[todo.id] = todo


def _lookup(id: str) -> Todo:
    try:
        return todos[int(id)]
    except (KeyError, ValueError):
        raise HTTPException(404, f"Todo {id} not found") from None


api = RouterWrapper.get_new("/api")


@api.router.get("/todos")
def list_todos(done: bool | None = None) -> list[Todo]:
    items = list(todos.values())
    if done is not None:
        items = [todo for todo in items if todo.done == done]
    return items


@api.router.get("/todos/{id}")
def get_todo(id: str) -> Todo:
    return _lookup(id)


@api.router.post("/todos")
def create_todo(body: TodoCreate) -> Todo:
    todo = Todo(id=next(_ids), title=body.title)
    todos[todo.id] = todo
    return todo


@api.router.put("/todos/{id}")
def update_todo(id: str, body: TodoUpdate) -> Todo:
    todo = _lookup(id)
    if body.title is not None:
        todo.title = body.title
    if body.done is not None:
        todo.done = body.done
    return todo


@api.router.delete("/todos/{id}")
def delete_todo(id: str) -> dict[str, Any]:
    todo = _lookup(id)
    del todos[todo.id]
    return {"deleted": todo.id}


@api.router.get("/search")
def search_todos(request: Request) -> dict[str, Any]:
    q = request.query_params.get("q", "").lower()
    try:
        limit = int(request.query_params.get("limit", 10))
    except ValueError:
        limit = 10
    results = [todo for todo in todos.values() if q in todo.title.lower()][:limit]
    return {"q": q, "limit": limit, "results": results}


api.describe_mcp(
    "/todos",
    "GET",
    {
        "description": "List all todos. Optionally filter by done status.",
        "params": {"done": {"description": 'Filter by done status: "true" or "false"'}},
    },
)
api.describe_mcp(
    "/todos/{id}",
    "GET",
    {
        "description": "Get a single todo by its ID.",
        "params": {"id": {"description": "The todo ID (number)"}},
    },
)
api.describe_mcp(
    "/todos",
    "POST",
    {
        "description": "Create a new todo.",
        "params": {"body": {"description": 'JSON with "title" field'}},
    },
)
api.describe_mcp(
    "/todos/{id}",
    "PUT",
    {
        "description": "Update an existing todo.",
        "params": {
            "id": {"description": "The todo ID to update"},
            "body": {"description": 'JSON with optional "title" and/or "done" fields'},
        },
    },
)
api.describe_mcp(
    "/todos/{id}",
    "DELETE",
    {
        "description": "Delete a todo by ID.",
        "params": {"id": {"description": "The todo ID to delete"}},
    },
)
api.describe_mcp(
    "/search",
    "GET",
    {
        "description": "Search todos by title substring.",
        "params": {
            "q": {"description": "Search query string"},
            "limit": {"description": "Max results to return (default 10)"},
        },
    },
)

_seed()
