"""Request handlers for the user resources.

Each handler performs one repository call and picks the response
representation from the request's Accept header.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, TypeVar

from pydantic import BaseModel, ValidationError
from starlette.exceptions import HTTPException
from starlette.responses import JSONResponse, PlainTextResponse, Response
from starlette.templating import Jinja2Templates

from directory.representations import USER_MEDIA_TYPES, MediaType, negotiate, represent
from shared.users.errors import UserMismatchError
from shared.users.models import LoginRequest, UserPayload

if TYPE_CHECKING:
    from starlette.requests import Request

    from shared.users.models import User
    from shared.users.repository import UserRepository

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

ABOUT_MEDIA_TYPES: tuple[MediaType, ...] = (MediaType.TEXT, MediaType.HTML)

M = TypeVar("M", bound=BaseModel)


class InvalidBodyError(Exception):
    """Request body is not a JSON object of the expected shape."""


def create_templates() -> Jinja2Templates:
    """Create the Jinja2 engine for the HTML representations."""
    return Jinja2Templates(directory=str(TEMPLATES_DIR))


def _repository(request: Request) -> UserRepository:
    return request.app.state.repository


def _user_response(request: Request, entity: User | list[User]) -> Response:
    media_type = negotiate(request.headers.get("accept"), USER_MEDIA_TYPES)
    return Response(represent(entity, media_type), media_type=media_type)


async def _parse_json_object(request: Request) -> dict:
    try:
        body = await request.json()
    except ValueError as e:
        raise InvalidBodyError("Invalid JSON body") from e
    if not isinstance(body, dict):
        raise InvalidBodyError("JSON body must be an object")
    return body


async def _parse_payload(request: Request, model: type[M]) -> M:
    body = await _parse_json_object(request)
    try:
        return model.model_validate(body)
    except ValidationError as e:
        raise InvalidBodyError(str(e)) from e


async def health(request: Request) -> JSONResponse:
    return JSONResponse({"status": "ok", "users": _repository(request).count()})


async def list_users(request: Request) -> Response:
    """GET /users - all users as JSON or XML."""
    return _user_response(request, _repository(request).list())


async def about(request: Request) -> Response:
    """GET /users/about - service description as plain text or HTML."""
    message = request.app.state.settings.about_message
    media_type = negotiate(request.headers.get("accept"), ABOUT_MEDIA_TYPES)
    if media_type == MediaType.HTML:
        templates: Jinja2Templates = request.app.state.templates
        return templates.TemplateResponse(request, "about.html", {"message": message})
    return PlainTextResponse(message)


async def get_user_by_id(request: Request) -> Response:
    """GET /users/{user_id} - 404 when no user has this id."""
    user = _repository(request).get_by_id(request.path_params["user_id"])
    if user is None:
        raise HTTPException(status_code=404)
    return _user_response(request, user)


async def get_user_by_name(request: Request) -> Response:
    """GET /users/{username} - 404 when no user has this name."""
    user = _repository(request).get_by_name(request.path_params["username"])
    if user is None:
        raise HTTPException(status_code=404)
    return _user_response(request, user)


async def create_user(request: Request) -> Response:
    """POST /users - create a user; a taken or missing username is a no-op."""
    payload = await _parse_payload(request, UserPayload)
    _repository(request).create(payload)
    return Response(status_code=204)


async def put_user(request: Request) -> Response:
    """PUT /users/{user_id} - create or update, only when the path id equals the body id."""
    user_id: int = request.path_params["user_id"]
    payload = await _parse_payload(request, UserPayload)
    repository = _repository(request)
    if payload.id == user_id:
        repository.create_or_update(payload)
    elif request.app.state.settings.strict_mode:
        raise UserMismatchError(f"Path id {user_id} does not match body id {payload.id!r}")
    return Response(status_code=204)


async def delete_user_by_id(request: Request) -> Response:
    _repository(request).delete_by_id(request.path_params["user_id"])
    return Response(status_code=204)


async def delete_user_by_name(request: Request) -> Response:
    _repository(request).delete_by_name(request.path_params["username"])
    return Response(status_code=204)


async def login(request: Request) -> Response:
    """POST /users/login {username, password} - the matching user, or 401."""
    credentials = await _parse_payload(request, LoginRequest)
    user = _repository(request).login(credentials.username, credentials.password)
    if user is None:
        return JSONResponse({"error": "Invalid credentials"}, status_code=401)
    return _user_response(request, user)
