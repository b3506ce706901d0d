"""Path templates for the user resources.

Route order matters: Starlette tries routes in declaration order, so the
literal /users/about and /users/login paths come first, then the numeric id
template, then the username template. A segment matching neither pattern
falls through to the router's 404.
"""

from __future__ import annotations

from starlette.convertors import Convertor, register_url_convertor
from starlette.routing import Route

from directory.views import user_handlers

# Bounded so conversion never hits the int digit limit; longer segments are 404.
USER_ID_PATTERN = "[1-9][0-9]{0,17}"
USERNAME_PATTERN = "[a-zA-Z][a-zA-Z_0-9]*"


class UserIdConvertor(Convertor[int]):
    regex = USER_ID_PATTERN

    def convert(self, value: str) -> int:
        return int(value)

    def to_string(self, value: int) -> str:
        if value < 1:
            raise ValueError("User ids are positive")
        return str(value)


class UsernameConvertor(Convertor[str]):
    regex = USERNAME_PATTERN

    def convert(self, value: str) -> str:
        return value

    def to_string(self, value: str) -> str:
        return value


# Must be registered before any Route using them is compiled.
register_url_convertor("user_id", UserIdConvertor())
register_url_convertor("username", UsernameConvertor())


def build_routes() -> list[Route]:
    return [
        Route("/health", user_handlers.health, methods=["GET"], name="health"),
        Route("/users", user_handlers.list_users, methods=["GET"], name="list_users"),
        Route("/users", user_handlers.create_user, methods=["POST"], name="create_user"),
        Route("/users/about", user_handlers.about, methods=["GET"], name="about"),
        Route("/users/login", user_handlers.login, methods=["POST"], name="login"),
        Route("/users/{user_id:user_id}", user_handlers.get_user_by_id, methods=["GET"], name="get_user_by_id"),
        Route("/users/{user_id:user_id}", user_handlers.put_user, methods=["PUT"], name="put_user"),
        Route(
            "/users/{user_id:user_id}",
            user_handlers.delete_user_by_id,
            methods=["DELETE"],
            name="delete_user_by_id",
        ),
        Route(
            "/users/{username:username}",
            user_handlers.get_user_by_name,
            methods=["GET"],
            name="get_user_by_name",
        ),
        Route(
            "/users/{username:username}",
            user_handlers.delete_user_by_name,
            methods=["DELETE"],
            name="delete_user_by_name",
        ),
    ]
