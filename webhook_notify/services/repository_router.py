"""Per-repository delivery routing.

The repository table is built once from configuration and only read
afterwards, so concurrent requests share it without locking.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING

import structlog
from pydantic import BaseModel, ConfigDict, field_validator

if TYPE_CHECKING:
    from webhook_notify.config import Settings

logger = structlog.get_logger()


def _unique(chat_ids: Iterable[int]) -> tuple[int, ...]:
    return tuple(dict.fromkeys(chat_ids))


class RepositoryConfig(BaseModel):
    """Routing entry for one repository."""

    model_config = ConfigDict(frozen=True)

    full_name: str
    send_to: tuple[int, ...] = ()
    branch_ignore: frozenset[str] = frozenset()
    secrets: str = ""

    @field_validator("send_to")
    @classmethod
    def _dedupe_send_to(cls, value: tuple[int, ...]) -> tuple[int, ...]:
        return _unique(value)


class EffectiveDelivery(BaseModel):
    """Resolved destinations, secret and ignore list for one event."""

    model_config = ConfigDict(frozen=True)

    destinations: tuple[int, ...]
    secret: str
    branch_ignore: frozenset[str] = frozenset()


class RepositoryRouter:
    """Map ``owner/name`` to delivery settings, falling back to global defaults."""

    def __init__(
        self,
        repositories: Iterable[RepositoryConfig],
        default_send_to: Iterable[int],
        default_secret: str = "",
    ) -> None:
        table: dict[str, RepositoryConfig] = {}
        for repo in repositories:
            if repo.full_name in table:
                logger.warning("repository_config_duplicate", full_name=repo.full_name)
            table[repo.full_name] = repo
        self._repositories: Mapping[str, RepositoryConfig] = MappingProxyType(table)
        self._default_send_to = _unique(default_send_to)
        self._default_secret = default_secret

    @classmethod
    def from_settings(cls, settings: Settings) -> RepositoryRouter:
        """Build the router from the ``[[repository]]`` tables of *settings*."""
        return cls(
            repositories=(
                RepositoryConfig(
                    full_name=entry.full_name,
                    send_to=tuple(entry.send_to),
                    branch_ignore=frozenset(entry.branch_ignore),
                    secrets=entry.secrets,
                )
                for entry in settings.repository
            ),
            default_send_to=settings.telegram.send_to,
            default_secret=settings.server.secrets,
        )

    @property
    def repositories(self) -> Mapping[str, RepositoryConfig]:
        return self._repositories

    def resolve(self, full_name: str) -> EffectiveDelivery:
        """Return the delivery settings for *full_name*.

        A repository without its own entry gets the global chats and secret.
        A repository entry always supplies its own secret, even when empty,
        but inherits the global chats when its ``send_to`` is empty.
        """
        repo = self._repositories.get(full_name)
        if repo is None:
            return EffectiveDelivery(
                destinations=self._default_send_to,
                secret=self._default_secret,
            )
        return EffectiveDelivery(
            destinations=repo.send_to or self._default_send_to,
            secret=repo.secrets,
            branch_ignore=repo.branch_ignore,
        )
