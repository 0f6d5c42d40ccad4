"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - UnitOfWorkFactory yields the shell's session object untyped (Any) so core
      does not depend on SQLAlchemy
"""

from collections.abc import Iterable
from contextlib import AbstractAsyncContextManager
from typing import Any, Protocol

from merch_store.core.domain_types import UserId


class IdentityResolver(Protocol):
    """Contract for username <-> id resolution — implemented by the user directory."""
    async def username_to_id(self, username: str) -> UserId | None: ...
    async def id_to_username(self, user_id: UserId) -> str | None: ...
    async def usernames_for(self, user_ids: Iterable[UserId]) -> dict[int, str]: ...


class UnitOfWorkFactory(Protocol):
    """Opens one atomic unit: commits on clean exit, rolls back fully on any exception."""
    def __call__(self) -> AbstractAsyncContextManager[Any]: ...
