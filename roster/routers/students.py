from __future__ import annotations

from urllib.parse import urlencode

from fastapi import APIRouter, Form, HTTPException, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from roster.core import csrf
from roster.core.config import Settings
from roster.core.logging_config import get_logger, log_with_context
from roster.domain.students import trim
from roster.services.roster_service import (
    PersistFailedError,
    RecordNotFoundError,
    RosterStore,
)

router = APIRouter(prefix="", tags=["students"])
logger = get_logger("http")

PERSIST_FAILED_MESSAGE = "Could not save changes."


def _get_roster(request: Request) -> RosterStore:
    store = getattr(getattr(request.app, "state", None), "roster", None)
    if store is None:
        raise RuntimeError("RosterStore not configured")
    return store


def _get_settings(request: Request) -> Settings:
    settings = getattr(getattr(request.app, "state", None), "settings", None)
    if settings is None:
        raise RuntimeError("Settings not configured")
    return settings


def _get_templates(request: Request) -> Jinja2Templates:
    tpl = getattr(getattr(request.app, "state", None), "templates", None)
    if tpl:
        return tpl
    raise RuntimeError("Templates not configured")


def _redirect_home(query: str = "") -> RedirectResponse:
    query = trim(query)
    dest = "/?" + urlencode({"q": query}) if query else "/"
    return RedirectResponse(dest, status_code=303)


def _render_page(
    request: Request,
    *,
    query: str = "",
    form: dict | None = None,
    editing_id: str = "",
    message: str = "",
    status_code: int = 200,
) -> HTMLResponse:
    store = _get_roster(request)
    templates = _get_templates(request)
    csrf_token = csrf.ensure_csrf_token(request)
    context = {
        "students": list(store.search(trim(query))),
        "total": len(store),
        "query": query,
        "form": form or {"name": "", "student_id": "", "email": "", "contact": ""},
        "editing_id": editing_id,
        "message": message,
        "csrf_token": csrf_token,
    }
    response = templates.TemplateResponse(request, "students.html", context, status_code=status_code)
    csrf.set_csrf_cookie(response, csrf_token, _get_settings(request))
    return response


@router.get("/", response_class=HTMLResponse)
def roster_page(request: Request, q: str = "", edit: str = ""):
    store = _get_roster(request)
    record = store.get(edit) if edit else None
    if not record:
        return _render_page(request, query=q)
    form = {
        "name": record.name,
        "student_id": record.student_id,
        "email": record.email,
        "contact": record.contact,
    }
    return _render_page(request, query=q, form=form, editing_id=record.id)


@router.post("/students")
def submit_student(
    request: Request,
    name: str = Form(""),
    student_id: str = Form(""),
    email: str = Form(""),
    contact: str = Form(""),
    editing_id: str = Form(""),
    q: str = Form(""),
    csrf_token: str = Form(""),
):
    csrf.validate_csrf(request, csrf_token)
    store = _get_roster(request)
    form = {"name": name, "student_id": student_id, "email": email, "contact": contact}
    editing_id = trim(editing_id)

    result = store.validate(name, student_id, email, contact)
    if not result.ok:
        return _render_page(
            request, query=q, form=form, editing_id=editing_id, message=result.message, status_code=400
        )

    try:
        if editing_id:
            store.update(editing_id, result.fields)
        else:
            store.create(result.fields)
    except RecordNotFoundError:
        # The record was removed while it was being edited; nothing to update.
        log_with_context(logger, "INFO", "Update ignored; record gone", context={"record_id": editing_id})
    except PersistFailedError:
        return _render_page(
            request, query=q, form=form, editing_id=editing_id, message=PERSIST_FAILED_MESSAGE, status_code=503
        )
    return _redirect_home(q)


@router.post("/students/clear")
def clear_students(request: Request, q: str = Form(""), csrf_token: str = Form("")):
    csrf.validate_csrf(request, csrf_token)
    try:
        _get_roster(request).clear()
    except PersistFailedError:
        return _render_page(request, query=q, message=PERSIST_FAILED_MESSAGE, status_code=503)
    return _redirect_home()


@router.post("/students/{record_id}/delete")
def delete_student(request: Request, record_id: str, q: str = Form(""), csrf_token: str = Form("")):
    csrf.validate_csrf(request, csrf_token)
    try:
        _get_roster(request).delete(record_id)
    except PersistFailedError:
        return _render_page(request, query=q, message=PERSIST_FAILED_MESSAGE, status_code=503)
    return _redirect_home(q)


@router.get("/api/students")
def list_students(request: Request, q: str = ""):
    records = [record.to_dict() for record in _get_roster(request).search(trim(q))]
    return {"students": records, "count": len(records)}


@router.get("/api/students/{record_id}")
def get_student(request: Request, record_id: str):
    record = _get_roster(request).get(record_id)
    if not record:
        raise HTTPException(404, "Student not found")
    return record.to_dict()
