from __future__ import annotations


class LoadGuard:
    """
    Request generation counter for a single view.
    Each load takes a token; only the holder of the latest token may write
    its result back, so a slow older response never overwrites a newer one.
    """

    def __init__(self) -> None:
        self._generation = 0

    @property
    def current(self) -> int:
        return self._generation

    def begin(self) -> int:
        self._generation += 1
        return self._generation

    def is_current(self, token: int) -> bool:
        return token == self._generation
