# Copyright 2025 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
# ==============================================================================

from dataclasses import asdict, dataclass, field, replace
from datetime import datetime
from enum import StrEnum
from typing import Any, List, Optional

from dacite import Config, from_dict

from todo_shared.json_utils import convert_keys


class Priority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


DEFAULT_PRIORITY = Priority.LOW

_DACITE_CONFIG = Config(check_types=False, cast=[Priority])


@dataclass
class User:
    """A signed-in account as reported by the identity provider."""

    uid: str
    email: str


@dataclass
class Task:
    """A task stored under users/{uid}/todoLists/{listId}/tasks."""

    id: str
    title: str
    description: str = ""
    due_date: Optional[str] = None
    priority: Priority = DEFAULT_PRIORITY
    created_at: Optional[datetime] = None

    @classmethod
    def from_document(cls, doc_id: str, fields: dict) -> "Task":
        data = convert_keys(fields, "camel_to_snake")
        data["id"] = doc_id
        if data.get("priority") not in list(Priority):
            data["priority"] = DEFAULT_PRIORITY
        if data.get("description") is None:
            data["description"] = ""
        return from_dict(data_class=cls, data=data, config=_DACITE_CONFIG)

    def to_fields(self) -> dict:
        """Document fields (camelCase, without the id)."""
        data = asdict(self)
        data.pop("id")
        data["priority"] = str(self.priority)
        return convert_keys(data, "snake_to_camel")

    def with_priority(self, priority: Priority) -> "Task":
        return replace(self, priority=priority)


@dataclass
class TodoList:
    """A named list stored under users/{uid}/todoLists, with its tasks attached."""

    id: str
    name: str
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    tasks: List[Task] = field(default_factory=list)

    @classmethod
    def from_document(
        cls, doc_id: str, fields: dict, tasks: Optional[List[Task]] = None
    ) -> "TodoList":
        data = convert_keys(fields, "camel_to_snake")
        data["id"] = doc_id
        data.pop("tasks", None)
        todo_list = from_dict(data_class=cls, data=data, config=_DACITE_CONFIG)
        todo_list.tasks = list(tasks or [])
        return todo_list

    def to_fields(self) -> dict:
        return convert_keys(
            {
                "name": self.name,
                "created_by": self.created_by,
                "created_at": self.created_at,
            },
            "snake_to_camel",
        )

    def find_task(self, task_id: str) -> Optional[Task]:
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None


@dataclass
class TaskDraft:
    """Per-list input buffer for the "add task" form."""

    title: str = ""
    description: str = ""
    due_date: str = ""
    priority: Priority = DEFAULT_PRIORITY

    FIELDS = ("title", "description", "due_date", "priority")

    def with_field(self, name: str, value: Any) -> "TaskDraft":
        if name not in self.FIELDS:
            raise ValueError(f"Unknown task field: {name}")
        if name == "priority":
            value = Priority(value) if value else DEFAULT_PRIORITY
        return replace(self, **{name: value})

    def to_fields(self, created_at: datetime) -> dict:
        return {
            "title": self.title,
            "description": self.description,
            "dueDate": self.due_date,
            "priority": str(self.priority or DEFAULT_PRIORITY),
            "createdAt": created_at,
        }
