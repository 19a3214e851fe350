"""
Pydantic schemas for the to-do HTTP API.
"""

from __future__ import annotations

from dataclasses import asdict
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from todo_shared.types import Priority, Task, TaskDraft, TodoList, User


class CredentialsRequest(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class AuthErrorResponse(BaseModel):
    detail: str


class UserResponse(BaseModel):
    uid: str
    email: str

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(uid=user.uid, email=user.email)


class SessionResponse(BaseModel):
    user: Optional[UserResponse] = None


class TaskResponse(BaseModel):
    id: str
    title: str
    description: str = ""
    due_date: Optional[str] = None
    priority: Priority = Priority.LOW
    created_at: Optional[datetime] = None

    @classmethod
    def from_task(cls, task: Task) -> "TaskResponse":
        return cls(**asdict(task))


class TaskDraftModel(BaseModel):
    title: str = ""
    description: str = ""
    due_date: str = ""
    priority: Priority = Priority.LOW

    @classmethod
    def from_draft(cls, draft: TaskDraft) -> "TaskDraftModel":
        return cls(**asdict(draft))


class TodoListResponse(BaseModel):
    id: str
    name: str
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    tasks: list[TaskResponse]
    draft: TaskDraftModel

    @classmethod
    def from_list(cls, todo_list: TodoList, draft: TaskDraft) -> "TodoListResponse":
        return cls(
            id=todo_list.id,
            name=todo_list.name,
            created_by=todo_list.created_by,
            created_at=todo_list.created_at,
            tasks=[TaskResponse.from_task(task) for task in todo_list.tasks],
            draft=TaskDraftModel.from_draft(draft),
        )


class DragStateResponse(BaseModel):
    task_id: str
    from_list_id: str


class TodoStateResponse(BaseModel):
    ok: bool = True
    user: Optional[UserResponse] = None
    new_list_name: str = ""
    lists: list[TodoListResponse]
    dragging: Optional[DragStateResponse] = None


class NewListRequest(BaseModel):
    name: str = ""


class TaskDraftUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    due_date: Optional[str] = None
    priority: Optional[Priority] = None


class PriorityUpdate(BaseModel):
    priority: Priority


class DragStartRequest(BaseModel):
    task_id: str
    from_list_id: str


class DropRequest(BaseModel):
    to_list_id: str
    priority: Optional[Priority] = None


class DragOverRequest(BaseModel):
    pointer_y: float
    viewport_height: float = Field(..., ge=0)


class DragOverResponse(BaseModel):
    scroll_by: int
