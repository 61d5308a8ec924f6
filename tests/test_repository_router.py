"""Tests for per-repository delivery resolution."""

import pytest
from helpers import make_settings

from webhook_notify.services.repository_router import (
    EffectiveDelivery,
    RepositoryConfig,
    RepositoryRouter,
)


@pytest.fixture
def router() -> RepositoryRouter:
    return RepositoryRouter.from_settings(make_settings())


@pytest.mark.parametrize("full_name", ["", "someone/else", "org/Repo", "org/repo/"])
def test_miss_returns_global_defaults(router: RepositoryRouter, full_name: str) -> None:
    """Names not in the table (lookup is exact) get the global chats and secret."""
    assert router.resolve(full_name) == EffectiveDelivery(
        destinations=(999,),
        secret="global-secret",
    )


def test_hit_returns_repository_settings(router: RepositoryRouter) -> None:
    delivery = router.resolve("org/repo")

    assert delivery.destinations == (111, 222)
    assert delivery.secret == "s3cr3t"
    assert delivery.branch_ignore == frozenset()


def test_empty_destinations_fall_back_but_secret_does_not(router: RepositoryRouter) -> None:
    """org/open has no chats and an empty secret: global chats, empty secret."""
    delivery = router.resolve("org/open")

    assert delivery.destinations == (999,)
    assert delivery.secret == ""


def test_branch_ignore_is_carried(router: RepositoryRouter) -> None:
    assert router.resolve("org/docs").branch_ignore == frozenset({"gh-pages"})


def test_duplicate_chat_ids_are_collapsed_in_order() -> None:
    router = RepositoryRouter(
        [RepositoryConfig(full_name="a/b", send_to=(3, 1, 3, 2, 1))],
        default_send_to=[5, 5, 4],
    )

    assert router.resolve("a/b").destinations == (3, 1, 2)
    assert router.resolve("x/y").destinations == (5, 4)


def test_duplicate_repository_keeps_last_entry() -> None:
    router = RepositoryRouter(
        [
            RepositoryConfig(full_name="a/b", send_to=(1,)),
            RepositoryConfig(full_name="a/b", send_to=(2,)),
        ],
        default_send_to=[],
    )

    assert router.resolve("a/b").destinations == (2,)
    assert len(router.repositories) == 1


def test_table_is_read_only(router: RepositoryRouter) -> None:
    with pytest.raises(TypeError):
        router.repositories["new/repo"] = RepositoryConfig(full_name="new/repo")  # type: ignore[index]


def test_repository_config_is_frozen() -> None:
    config = RepositoryConfig(full_name="a/b")

    with pytest.raises(ValueError):
        config.secrets = "changed"  # type: ignore[misc]
