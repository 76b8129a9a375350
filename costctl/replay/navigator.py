"""Cursor over the steps of a session record."""

from .errors import ValidationError


class Navigator:
    """
    Bounded cursor over step indices ``0..total-1``.

    Moves clamp at both ends; there is no wraparound. Jumps use 1-based
    message numbers as typed by the user.
    """

    def __init__(self, total: int, start: int = 0):
        if total <= 0:
            raise ValueError("Navigator requires at least one step")
        if not 0 <= start < total:
            raise ValueError(f"start index {start} outside 0..{total - 1}")
        self._total = total
        self._cursor = start

    @property
    def cursor(self) -> int:
        """Current 0-based step index."""
        return self._cursor

    @property
    def position(self) -> int:
        """Current 1-based message number."""
        return self._cursor + 1

    @property
    def total(self) -> int:
        return self._total

    @property
    def at_start(self) -> bool:
        return self._cursor == 0

    @property
    def at_end(self) -> bool:
        return self._cursor == self._total - 1

    def next(self) -> int:
        self._cursor = min(self._cursor + 1, self._total - 1)
        return self._cursor

    def previous(self) -> int:
        self._cursor = max(self._cursor - 1, 0)
        return self._cursor

    def jump_to(self, number) -> int:
        """Move to 1-based message ``number``; raises ValidationError if out of range."""
        if isinstance(number, bool) or not isinstance(number, int):
            raise ValidationError("Invalid message number.")
        if not 1 <= number <= self._total:
            raise ValidationError(
                f"Invalid message number. Choose between 1 and {self._total}."
            )
        self._cursor = number - 1
        return self._cursor
