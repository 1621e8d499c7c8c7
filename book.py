from __future__ import annotations


class Book:
    """Represents a catalogued book and its copy counts."""

    def __init__(self, id: str, title: str, author: str, copies: int = 1) -> None:
        self._id = id.strip()
        self._title = title.strip()
        self._author = author.strip()
        self._total = max(0, copies)
        self._available = self._total

    @property
    def id(self) -> str:
        return self._id

    @property
    def title(self) -> str:
        return self._title

    @property
    def author(self) -> str:
        return self._author

    @property
    def total_copies(self) -> int:
        return self._total

    @property
    def available_copies(self) -> int:
        return self._available

    @property
    def on_loan(self) -> int:
        return self.total_copies - self.available_copies

    def borrow(self) -> bool:
        """Take one available copy off the shelf."""
        if self._available > 0:
            self._available -= 1
            return True
        return False

    def return_copy(self) -> bool:
        """Put one copy back; refuses to push availability past the total."""
        if self._available < self._total:
            self._available += 1
            return True
        return False

    def add_copies(self, n: int) -> None:
        if n > 0:
            self._total += n
            self._available += n

    def remove_copies(self, n: int) -> None:
        """Drop up to ``n`` copies, taking available ones before lent ones."""
        if n <= 0:
            return
        remove = min(n, self._total)
        self._available -= min(remove, self._available)
        self._total -= remove
        self._total = max(0, self._total)
        self._available = max(0, self._available)

    def __str__(self) -> str:
        return f"[{self.id}] {self.title} by {self.author} (Available: {self.available_copies}/{self.total_copies})"

    def __repr__(self) -> str:
        return f"Book(id={self.id!r}, title={self.title!r}, author={self.author!r})"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "author": self.author,
            "total_copies": self.total_copies,
            "available_copies": self.available_copies,
        }
