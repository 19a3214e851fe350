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

USERS_COLLECTION = "users"
TODO_LISTS_COLLECTION = "todoLists"
TASKS_COLLECTION = "tasks"


def todo_lists_path(uid: str) -> str:
    """Collection path holding a user's lists: users/{uid}/todoLists."""
    return f"{USERS_COLLECTION}/{uid}/{TODO_LISTS_COLLECTION}"


def tasks_path(uid: str, list_id: str) -> str:
    """Collection path holding a list's tasks: users/{uid}/todoLists/{listId}/tasks."""
    return f"{todo_lists_path(uid)}/{list_id}/{TASKS_COLLECTION}"
