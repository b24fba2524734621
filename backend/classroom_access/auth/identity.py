"""
Request identity resolution.

One capability, two backing strategies tried in a fixed order:

1. SessionIdentity - ``user_id`` stored in the signed Starlette session
   (set by the login flow, e.g. the mock SSO handler).
2. AuthenticatedUserIdentity - ``scope["user"]`` populated by an
   authentication middleware (e.g. an OAuth backend). The value may be a user
   object with an ``id`` attribute or a bare id.

The first strategy that yields a usable id wins. Nothing here checks that the
user exists; callers look the id up themselves.
"""
from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any, Protocol

from starlette.requests import HTTPConnection

logger = logging.getLogger(__name__)

SESSION_USER_KEY = "user_id"


def coerce_user_id(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    logger.warning("identity_ignored reason=non_integer_id value_type=%s", type(value).__name__)
    return None


class IdentityStrategy(Protocol):
    name: str

    def resolve(self, connection: HTTPConnection) -> int | None:
        ...


class SessionIdentity:
    name = "session"

    def resolve(self, connection: HTTPConnection) -> int | None:
        # connection.session asserts when SessionMiddleware is absent
        session = connection.scope.get("session")
        if not session:
            return None
        return coerce_user_id(session.get(SESSION_USER_KEY))


class AuthenticatedUserIdentity:
    name = "authenticated_user"

    def resolve(self, connection: HTTPConnection) -> int | None:
        user = connection.scope.get("user")
        if user is None:
            return None
        if not getattr(user, "is_authenticated", True):
            return None
        if isinstance(user, (int, str)):
            return coerce_user_id(user)
        return coerce_user_id(getattr(user, "id", None))


class IdentityResolver:
    def __init__(self, strategies: Sequence[IdentityStrategy]) -> None:
        self.strategies = tuple(strategies)

    def resolve(self, connection: HTTPConnection) -> int | None:
        for strategy in self.strategies:
            user_id = strategy.resolve(connection)
            if user_id is not None:
                logger.debug("identity_resolved strategy=%s user_id=%s", strategy.name, user_id)
                return user_id
        return None


default_identity_resolver = IdentityResolver([SessionIdentity(), AuthenticatedUserIdentity()])
