"""Tests for the exception hierarchy."""

import pytest

from colmena.errors import (
    CacheError,
    ColmenaError,
    IconNotFoundError,
    InvalidKeyError,
    InvalidNameError,
    InvalidSourceDataError,
    InvalidSvgError,
    ManagerNotSetError,
    ProviderError,
    ProviderNotFoundError,
    StorageError,
)


class TestHierarchy:
    @pytest.mark.parametrize(
        ("error", "parent"),
        [
            (InvalidNameError, ColmenaError),
            (IconNotFoundError, ColmenaError),
            (ProviderNotFoundError, IconNotFoundError),
            (ProviderError, ColmenaError),
            (InvalidSourceDataError, ProviderError),
            (InvalidSvgError, ProviderError),
            (CacheError, ColmenaError),
            (InvalidKeyError, CacheError),
            (InvalidKeyError, ValueError),
            (StorageError, CacheError),
            (ManagerNotSetError, ColmenaError),
        ],
    )
    def test_subclass(self, error: type[Exception], parent: type[Exception]) -> None:
        assert issubclass(error, parent)


class TestMessages:
    def test_invalid_name(self) -> None:
        error = InvalidNameError("a:")
        assert error.name == "a:"
        assert str(error) == "Invalid icon name format: 'a:'"

    def test_invalid_name_custom_message(self) -> None:
        assert str(InvalidNameError("x", "custom")) == "custom"

    def test_icon_not_found(self) -> None:
        error = IconNotFoundError("tabler:nope")
        assert error.name == "tabler:nope"
        assert str(error) == "Icon not found: tabler:nope"

    def test_provider_not_found(self) -> None:
        error = ProviderNotFoundError("mdi:home", "mdi")
        assert error.name == "mdi:home"
        assert error.prefix == "mdi"
        assert str(error) == "No provider registered for prefix: mdi"

    def test_invalid_key(self) -> None:
        error = InvalidKeyError("a:b")
        assert error.key == "a:b"
        assert "a:b" in str(error)
