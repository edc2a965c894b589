"""Directory provider: SVG files on disk.

Maps a local name to ``<directory>/<name>.<extension>``. Names may contain
``/`` to reach icons in subdirectories (``"brands/github"``).

Every resolved path is checked to stay inside the configured directory
before anything is read. Names that escape it (``"../secret"``, absolute
paths, symlinks pointing outside) resolve to not-found, never to an error
that would reveal where the file lives.
"""

from __future__ import annotations

from pathlib import Path

from colmena.errors import InvalidSvgError, ProviderError
from colmena.icon import Icon
from colmena.utils.logger import get_logger

logger = get_logger(__name__)


class DirectoryProvider:
    """Provider backed by a directory of SVG files.

    Args:
        directory: Root directory of the icon set
        recursive: Include subdirectories in ``all()``
        extension: File extension without the dot

    Raises:
        ProviderError: If the directory does not exist

    Example:
        >>> provider = DirectoryProvider("resources/icons")
        >>> provider.get("home")
        Icon(content='<path .../>', ...)
    """

    __slots__ = ("_directory", "_extension", "_preloaded", "_recursive", "_root")

    def __init__(
        self,
        directory: str | Path,
        *,
        recursive: bool = True,
        extension: str = "svg",
    ) -> None:
        self._directory = Path(directory)
        if not self._directory.is_dir():
            msg = f"Directory does not exist: {self._directory}"
            raise ProviderError(msg)

        self._root = self._directory.resolve()
        self._recursive = recursive
        self._extension = extension.lstrip(".")
        self._preloaded: dict[str, Icon] | None = None

    @property
    def directory(self) -> Path:
        """Configured icon directory."""
        return self._directory

    def get(self, name: str) -> Icon | None:
        """Load and parse the icon file for ``name``.

        Raises:
            ProviderError: If the file exists but is not valid SVG
        """
        if self._preloaded is not None and name in self._preloaded:
            return self._preloaded[name]

        path = self._resolve_path(name)
        if path is None:
            return None

        try:
            return Icon.from_file(path)
        except InvalidSvgError as e:
            msg = f"Failed to load icon {name!r} from {path}: {e}"
            raise ProviderError(msg) from e

    def has(self, name: str) -> bool:
        return self._resolve_path(name) is not None

    def all(self) -> list[str]:
        """List icon names, sorted, with ``/`` as the group separator."""
        if self._preloaded is not None:
            return list(self._preloaded)

        pattern = f"*.{self._extension}"
        files = self._root.rglob(pattern) if self._recursive else self._root.glob(pattern)

        names = []
        for path in files:
            if not path.is_file():
                continue
            relative = path.relative_to(self._root).with_suffix("")
            names.append(relative.as_posix())
        return sorted(names)

    def preload(self) -> None:
        """Parse every icon now and serve later lookups from memory."""
        self._preloaded = None
        loaded: dict[str, Icon] = {}
        for name in self.all():
            icon = self.get(name)
            if icon is not None:
                loaded[name] = icon
        self._preloaded = loaded
        logger.debug("Preloaded %d icons from %s", len(loaded), self._directory)

    def clear_cache(self) -> None:
        """Drop preloaded icons."""
        self._preloaded = None

    def _resolve_path(self, name: str) -> Path | None:
        """Map a name to a file inside the root, or None."""
        if not name or "\x00" in name:
            return None

        candidate = self._root / f"{name}.{self._extension}"
        try:
            resolved = candidate.resolve()
        except (OSError, RuntimeError):
            return None

        if not resolved.is_relative_to(self._root) or resolved == self._root:
            return None
        if not resolved.is_file():
            return None
        return resolved
