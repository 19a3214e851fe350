"""
HTTP routes for the to-do API.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import RedirectResponse

from todo_backend.config import Settings, get_settings
from todo_backend.dependencies import get_session_registry
from todo_backend.schemas import (
    AuthErrorResponse,
    CredentialsRequest,
    DragOverRequest,
    DragOverResponse,
    DragStartRequest,
    DragStateResponse,
    DropRequest,
    NewListRequest,
    PriorityUpdate,
    SessionResponse,
    TaskDraftUpdate,
    TodoListResponse,
    TodoStateResponse,
    UserResponse,
)
from todo_backend.sessions import ClientSession, SessionRegistry
from todo_backend.signup import SignupView
from todo_shared.constants import HOME_ROUTE

logger = logging.getLogger(__name__)

router = APIRouter()


def get_client_session(
    request: Request,
    registry: SessionRegistry = Depends(get_session_registry),
    settings: Settings = Depends(get_settings),
) -> ClientSession:
    return registry.open(request.cookies.get(settings.session_cookie_name))


def find_client_session(
    request: Request,
    registry: SessionRegistry = Depends(get_session_registry),
    settings: Settings = Depends(get_settings),
) -> Optional[ClientSession]:
    return registry.get(request.cookies.get(settings.session_cookie_name))


def require_user(
    session: Optional[ClientSession] = Depends(find_client_session),
) -> ClientSession:
    if session is None or session.auth.current_user is None:
        raise HTTPException(status_code=401, detail="Not signed in")
    return session


def _state(session: ClientSession, ok: bool = True) -> TodoStateResponse:
    view = session.todo
    user = view.user
    dragging = None
    if view.dragged:
        dragging = DragStateResponse(
            task_id=view.dragged.task.id, from_list_id=view.dragged.from_list_id
        )
    return TodoStateResponse(
        ok=ok,
        user=UserResponse.from_user(user) if user else None,
        new_list_name=view.new_list_name,
        lists=[
            TodoListResponse.from_list(todo_list, view.draft_for(todo_list.id))
            for todo_list in view.todo_lists
        ],
        dragging=dragging,
    )


def _redirect(session: ClientSession, settings: Settings) -> RedirectResponse:
    route = session.take_redirect() or HOME_ROUTE
    response = RedirectResponse(route, status_code=303)
    response.set_cookie(
        settings.session_cookie_name, session.session_id, httponly=True, samesite="lax"
    )
    return response


def _authenticate(
    view: SignupView,
    payload: CredentialsRequest,
    session: ClientSession,
    registry: SessionRegistry,
    settings: Settings,
):
    with session.lock:
        if not view.submit(payload.email, payload.password):
            messages = session.take_notifications()
            if session.auth.current_user is None:
                # The 400 response carries no cookie, so the session is unreachable.
                registry.close(session.session_id)
            raise HTTPException(
                status_code=400,
                detail=messages[-1] if messages else "Authentication failed",
            )
        return _redirect(session, settings)


@router.post(
    "/signup",
    status_code=303,
    response_class=RedirectResponse,
    responses={400: {"model": AuthErrorResponse}},
)
def signup(
    payload: CredentialsRequest,
    session: ClientSession = Depends(get_client_session),
    registry: SessionRegistry = Depends(get_session_registry),
    settings: Settings = Depends(get_settings),
):
    """
    Create an account; on success the session is signed in and redirected home.
    """
    return _authenticate(session.signup, payload, session, registry, settings)


@router.post(
    "/login",
    status_code=303,
    response_class=RedirectResponse,
    responses={400: {"model": AuthErrorResponse}},
)
def login(
    payload: CredentialsRequest,
    session: ClientSession = Depends(get_client_session),
    registry: SessionRegistry = Depends(get_session_registry),
    settings: Settings = Depends(get_settings),
):
    return _authenticate(session.login, payload, session, registry, settings)


@router.post("/logout", responses={200: {"model": TodoStateResponse}})
def logout(
    session: Optional[ClientSession] = Depends(find_client_session),
    registry: SessionRegistry = Depends(get_session_registry),
    settings: Settings = Depends(get_settings),
):
    if session is None:
        return RedirectResponse(HOME_ROUTE, status_code=303)
    with session.lock:
        if not session.todo.logout():
            return _state(session, ok=False)
        route = session.take_redirect() or HOME_ROUTE
    registry.close(session.session_id)
    response = RedirectResponse(route, status_code=303)
    response.delete_cookie(settings.session_cookie_name)
    return response


@router.get("/session", response_model=SessionResponse)
def current_session(
    session: Optional[ClientSession] = Depends(find_client_session),
):
    user = session.auth.current_user if session else None
    return SessionResponse(user=UserResponse.from_user(user) if user else None)


@router.get("/lists", response_model=TodoStateResponse)
def get_lists(session: ClientSession = Depends(require_user)):
    with session.lock:
        return _state(session)


@router.post("/lists/refresh", response_model=TodoStateResponse)
def refresh_lists(session: ClientSession = Depends(require_user)):
    with session.lock:
        ok = session.todo.refresh()
        return _state(session, ok=ok)


@router.post("/lists", response_model=TodoStateResponse)
def add_list(payload: NewListRequest, session: ClientSession = Depends(require_user)):
    with session.lock:
        ok = session.todo.add_list(payload.name)
        return _state(session, ok=ok)


@router.put("/lists/{list_id}/draft", response_model=TodoStateResponse)
def update_task_draft(
    list_id: str,
    payload: TaskDraftUpdate,
    session: ClientSession = Depends(require_user),
):
    with session.lock:
        for field, value in payload.model_dump(exclude_none=True).items():
            session.todo.set_task_input(list_id, field, value)
        return _state(session)


@router.post("/lists/{list_id}/tasks", response_model=TodoStateResponse)
def add_task(
    list_id: str,
    payload: Optional[TaskDraftUpdate] = None,
    session: ClientSession = Depends(require_user),
):
    with session.lock:
        if payload:
            for field, value in payload.model_dump(exclude_none=True).items():
                session.todo.set_task_input(list_id, field, value)
        ok = session.todo.add_task(list_id)
        return _state(session, ok=ok)


@router.patch("/lists/{list_id}/tasks/{task_id}", response_model=TodoStateResponse)
def update_task_priority(
    list_id: str,
    task_id: str,
    payload: PriorityUpdate,
    session: ClientSession = Depends(require_user),
):
    with session.lock:
        ok = session.todo.update_task_priority(list_id, task_id, payload.priority)
        return _state(session, ok=ok)


@router.delete("/lists/{list_id}/tasks/{task_id}", response_model=TodoStateResponse)
def delete_task(
    list_id: str,
    task_id: str,
    session: ClientSession = Depends(require_user),
):
    with session.lock:
        ok = session.todo.delete_task(list_id, task_id)
        return _state(session, ok=ok)


@router.post("/drag/start", response_model=TodoStateResponse)
def start_drag(
    payload: DragStartRequest, session: ClientSession = Depends(require_user)
):
    with session.lock:
        ok = session.todo.start_drag(payload.task_id, payload.from_list_id)
        return _state(session, ok=ok)


@router.post("/drag/drop", response_model=TodoStateResponse)
def drop(payload: DropRequest, session: ClientSession = Depends(require_user)):
    with session.lock:
        ok = session.todo.drop(payload.to_list_id, payload.priority)
        return _state(session, ok=ok)


@router.post("/drag/end", response_model=TodoStateResponse)
def end_drag(session: ClientSession = Depends(require_user)):
    with session.lock:
        session.todo.end_drag()
        return _state(session)


@router.post("/drag/over", response_model=DragOverResponse)
def drag_over(payload: DragOverRequest, session: ClientSession = Depends(require_user)):
    with session.lock:
        return DragOverResponse(
            scroll_by=session.todo.scroll_delta(
                payload.pointer_y, payload.viewport_height
            )
        )
