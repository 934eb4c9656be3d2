# app/dependencies/__init__.py

from app.dependencies.dependencies import (
    AuthServiceDep,
    CurrentUserDep,
    OptionalUserDep,
    PostListQuery,
    PostQueryListDep,
    PostRepoDep,
    PostServiceDep,
    UserRepoDep,
    get_current_user,
    get_optional_user,
    get_post_list_query,
)

__all__ = [
    "AuthServiceDep",
    "CurrentUserDep",
    "OptionalUserDep",
    "PostListQuery",
    "PostQueryListDep",
    "PostRepoDep",
    "PostServiceDep",
    "UserRepoDep",
    "get_current_user",
    "get_optional_user",
    "get_post_list_query",
]
