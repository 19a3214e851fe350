"""
Todo view: in-memory mirror of the signed-in user's lists and tasks, the
mutations issued against the document store, drag-and-drop handling and
logout.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

from dacite import DaciteError

from todo_backend.auth import AuthClient, Unsubscribe
from todo_backend.config import RefreshPolicy
from todo_backend.errors import AuthError, StoreError
from todo_backend.store import DocumentStore
from todo_shared.constants import DRAG_SCROLL_STEP, DRAG_SCROLL_THRESHOLD, HOME_ROUTE
from todo_shared.firebase_constants import tasks_path, todo_lists_path
from todo_shared.types import Priority, Task, TaskDraft, TodoList, User

logger = logging.getLogger(__name__)


def scroll_step_for_pointer(pointer_y: float, viewport_height: float) -> int:
    """Vertical scroll to apply for a drag-over event at `pointer_y`."""
    if pointer_y < DRAG_SCROLL_THRESHOLD:
        return -DRAG_SCROLL_STEP
    if viewport_height - pointer_y < DRAG_SCROLL_THRESHOLD:
        return DRAG_SCROLL_STEP
    return 0


@dataclass
class DragState:
    task: Task
    from_list_id: str


class TodoView:
    """
    State and operations behind the to-do page of one client session.

    Every store call is made on behalf of ``auth.current_user``; with nobody
    signed in the mutations are no-ops. Failed store calls are logged and
    leave the local state as it was.
    """

    def __init__(
        self,
        auth: AuthClient,
        store: DocumentStore,
        navigate: Callable[[str], None],
        refresh_policy: RefreshPolicy = RefreshPolicy.FULL,
    ):
        self.auth = auth
        self.store = store
        self.navigate = navigate
        self.refresh_policy = RefreshPolicy(refresh_policy)

        self.todo_lists: List[TodoList] = []
        self.new_list_name = ""
        self.task_inputs: Dict[str, TaskDraft] = {}
        self.dragged: Optional[DragState] = None
        self._unsubscribe: Optional[Unsubscribe] = None

    # -------------------- auth subscription --------------------
    def attach(self) -> None:
        if self._unsubscribe is None:
            self._unsubscribe = self.auth.on_auth_state_changed(
                self._on_auth_state_changed
            )

    def detach(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    @property
    def attached(self) -> bool:
        return self._unsubscribe is not None

    def _on_auth_state_changed(self, user: Optional[User]) -> None:
        if user:
            self.refresh(user)
        else:
            self.todo_lists = []
            self.task_inputs = {}
            self.dragged = None

    @property
    def user(self) -> Optional[User]:
        return self.auth.current_user

    # -------------------- loading --------------------
    def refresh(self, user: Optional[User] = None) -> bool:
        """Refetch every list of the user and every task of each list."""
        user = user or self.user
        if not user:
            return False
        try:
            fetched: List[TodoList] = []
            for list_id, list_fields in self.store.list_documents(
                todo_lists_path(user.uid)
            ):
                tasks: List[Task] = []
                for task_id, task_fields in self.store.list_documents(
                    tasks_path(user.uid, list_id)
                ):
                    try:
                        tasks.append(Task.from_document(task_id, task_fields))
                    except (ValueError, DaciteError) as e:
                        logger.warning("Skipping unreadable task %s: %s", task_id, e)
                try:
                    fetched.append(TodoList.from_document(list_id, list_fields, tasks))
                except (ValueError, DaciteError) as e:
                    logger.warning("Skipping unreadable list %s: %s", list_id, e)
        except StoreError as e:
            logger.error("Error fetching to-do lists: %s", e)
            return False
        self.todo_lists = fetched
        logger.debug("Loaded %d lists for %s", len(fetched), user.uid)
        return True

    def _reconcile(self, user: User, patch: Callable[[], None]) -> None:
        if self.refresh_policy == RefreshPolicy.PATCH:
            patch()
        else:
            self.refresh(user)

    def find_list(self, list_id: str) -> Optional[TodoList]:
        for todo_list in self.todo_lists:
            if todo_list.id == list_id:
                return todo_list
        return None

    # -------------------- lists --------------------
    def set_new_list_name(self, name: str) -> None:
        self.new_list_name = name

    def add_list(self, name: Optional[str] = None) -> bool:
        if name is not None:
            self.new_list_name = name
        user = self.user
        if not self.new_list_name.strip() or not user:
            return False

        todo_list = TodoList(
            id="",
            name=self.new_list_name,
            created_by=user.email,
            created_at=datetime.now(timezone.utc),
        )
        try:
            todo_list.id = self.store.create_document(
                todo_lists_path(user.uid), todo_list.to_fields()
            )
        except StoreError as e:
            logger.error("Error adding to-do list: %s", e)
            return False

        self._reconcile(user, lambda: self.todo_lists.append(todo_list))
        self.new_list_name = ""
        return True

    # -------------------- tasks --------------------
    def draft_for(self, list_id: str) -> TaskDraft:
        return self.task_inputs.get(list_id) or TaskDraft()

    def set_task_input(self, list_id: str, field: str, value) -> TaskDraft:
        draft = self.draft_for(list_id).with_field(field, value)
        self.task_inputs[list_id] = draft
        return draft

    def add_task(self, list_id: str) -> bool:
        user = self.user
        draft = self.task_inputs.get(list_id)
        if not draft or not draft.title.strip() or not user:
            return False

        fields = draft.to_fields(created_at=datetime.now(timezone.utc))
        try:
            task_id = self.store.create_document(tasks_path(user.uid, list_id), fields)
        except StoreError as e:
            logger.error("Error adding task: %s", e)
            return False

        def patch() -> None:
            todo_list = self.find_list(list_id)
            if todo_list:
                todo_list.tasks.append(Task.from_document(task_id, fields))

        self._reconcile(user, patch)
        self.task_inputs[list_id] = TaskDraft()
        return True

    def update_task_priority(
        self, list_id: str, task_id: str, priority: Priority | str
    ) -> bool:
        user = self.user
        if not user:
            return False
        priority = Priority(priority)
        try:
            self.store.update_document(
                tasks_path(user.uid, list_id), task_id, {"priority": str(priority)}
            )
        except StoreError as e:
            logger.error("Error updating task priority: %s", e)
            return False

        def patch() -> None:
            todo_list = self.find_list(list_id)
            if not todo_list:
                return
            todo_list.tasks = [
                task.with_priority(priority) if task.id == task_id else task
                for task in todo_list.tasks
            ]

        self._reconcile(user, patch)
        return True

    def delete_task(self, list_id: str, task_id: str) -> bool:
        user = self.user
        if not user:
            return False
        try:
            self.store.delete_document(tasks_path(user.uid, list_id), task_id)
        except StoreError as e:
            logger.error("Error deleting task: %s", e)
            return False

        def patch() -> None:
            todo_list = self.find_list(list_id)
            if todo_list:
                todo_list.tasks = [t for t in todo_list.tasks if t.id != task_id]

        self._reconcile(user, patch)
        return True

    def move_task(
        self,
        from_list_id: str,
        to_list_id: str,
        task: Task,
        priority: Priority | str,
    ) -> bool:
        """
        Move `task` to another list with a new priority.

        The copy and the delete are one atomic store write, and the local
        state is patched directly instead of refetched.
        """
        user = self.user
        if not user:
            return False
        moved = task.with_priority(Priority(priority))
        try:
            moved.id = self.store.move_document(
                tasks_path(user.uid, from_list_id),
                task.id,
                tasks_path(user.uid, to_list_id),
                moved.to_fields(),
            )
        except StoreError as e:
            logger.error("Error moving task to another list: %s", e)
            return False

        source = self.find_list(from_list_id)
        if source:
            source.tasks = [t for t in source.tasks if t.id != task.id]
        target = self.find_list(to_list_id)
        if target:
            target.tasks = [*target.tasks, moved]
        logger.info(
            "Moved task %s from list %s to %s as %s",
            task.id,
            from_list_id,
            to_list_id,
            moved.id,
        )
        return True

    # -------------------- drag and drop --------------------
    @property
    def is_dragging(self) -> bool:
        return self.dragged is not None

    def start_drag(self, task_id: str, from_list_id: str) -> bool:
        todo_list = self.find_list(from_list_id)
        task = todo_list.find_task(task_id) if todo_list else None
        if task is None:
            return False
        self.dragged = DragState(task=replace(task), from_list_id=from_list_id)
        return True

    def end_drag(self) -> None:
        self.dragged = None

    def drop(self, to_list_id: str, priority: Priority | str | None = None) -> bool:
        """
        Drop the dragged task on `to_list_id`.

        Only priority drop targets act: same list updates the priority,
        another list moves the task. A drop without a priority does nothing.
        The drag ends either way.
        """
        dragged = self.dragged
        if dragged is None:
            return False
        try:
            if not priority:
                return False
            if dragged.from_list_id == to_list_id:
                return self.update_task_priority(
                    dragged.from_list_id, dragged.task.id, priority
                )
            return self.move_task(
                dragged.from_list_id, to_list_id, dragged.task, priority
            )
        finally:
            self.dragged = None

    def scroll_delta(self, pointer_y: float, viewport_height: float) -> int:
        if not self.is_dragging:
            return 0
        return scroll_step_for_pointer(pointer_y, viewport_height)

    # -------------------- logout --------------------
    def logout(self) -> bool:
        try:
            self.auth.sign_out()
        except AuthError as e:
            logger.error("Error signing out: %s", e)
            return False
        self.navigate(HOME_ROUTE)
        return True
