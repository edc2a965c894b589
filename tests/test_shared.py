"""Tests for the process-wide manager slot."""

import threading
from collections.abc import Iterator

import pytest
from conftest import DictProvider

from colmena import Icon, IconManager
from colmena.errors import ColmenaError, IconNotFoundError, ManagerNotSetError
from colmena.shared import get_manager, has_manager, icon, reset_manager, set_manager


@pytest.fixture(autouse=True)
def clean_slot() -> Iterator[None]:
    reset_manager()
    yield
    reset_manager()


@pytest.fixture
def manager() -> IconManager:
    return IconManager().register("ui", DictProvider({"home": Icon("<path/>")}))


class TestManagerSlot:
    def test_unset(self) -> None:
        assert not has_manager()
        with pytest.raises(ManagerNotSetError, match="set_manager"):
            get_manager()

    def test_error_is_colmena_error(self) -> None:
        with pytest.raises(ColmenaError):
            get_manager()

    def test_set_and_get(self, manager: IconManager) -> None:
        set_manager(manager)
        assert has_manager()
        assert get_manager() is manager

    def test_replace(self, manager: IconManager) -> None:
        other = IconManager()
        set_manager(manager)
        set_manager(other)
        assert get_manager() is other

    def test_reset(self, manager: IconManager) -> None:
        set_manager(manager)
        reset_manager()
        assert not has_manager()

    def test_concurrent_set(self) -> None:
        managers = [IconManager() for _ in range(8)]
        threads = [threading.Thread(target=set_manager, args=(m,)) for m in managers]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        assert any(get_manager() is m for m in managers)


class TestIconHelper:
    def test_renders_markup(self, manager: IconManager) -> None:
        set_manager(manager)
        assert icon("ui:home", {"class": "w-6"}) == (
            '<svg class="w-6" aria-hidden="true"><path/></svg>'
        )

    def test_without_manager(self) -> None:
        with pytest.raises(ManagerNotSetError):
            icon("ui:home")

    def test_errors_propagate(self, manager: IconManager) -> None:
        set_manager(manager)
        with pytest.raises(IconNotFoundError):
            icon("ui:nope")
