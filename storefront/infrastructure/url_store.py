"""URL store - the browser location as an externally owned store.

The engine never reads ambient URL state: it reads and writes the
current query string through this narrow get/set interface. Writes
push a history entry; ``back``/``forward`` model browser navigation,
which changes the query without the engine's involvement.
"""

from typing import Protocol


class UrlStore(Protocol):
    """Read/write access to the current page query string."""

    def get(self) -> str:
        """Get the current query string (without "?")."""
        ...

    def set(self, query: str) -> None:
        """Navigate to a new query string."""
        ...


class InMemoryUrlStore:
    """History-backed URL store for server-side rendering and tests."""

    def __init__(self, query: str = "") -> None:
        self._history: list[str] = [query.lstrip("?")]
        self._position = 0

    def get(self) -> str:
        """Get the current query string."""
        return self._history[self._position]

    def set(self, query: str) -> None:
        """Push a new query string, discarding any forward history."""
        del self._history[self._position + 1 :]
        self._history.append(query.lstrip("?"))
        self._position += 1

    def back(self) -> bool:
        """Go back one entry.

        Returns:
            True if the position changed.
        """
        if self._position == 0:
            return False
        self._position -= 1
        return True

    def forward(self) -> bool:
        """Go forward one entry.

        Returns:
            True if the position changed.
        """
        if self._position >= len(self._history) - 1:
            return False
        self._position += 1
        return True

    @property
    def history(self) -> list[str]:
        """All entries, oldest first."""
        return list(self._history)
