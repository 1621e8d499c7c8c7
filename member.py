from __future__ import annotations

from typing import List, Tuple


class Member:
    """A registered member and the ids of the books they currently hold."""

    def __init__(self, id: str, name: str) -> None:
        self._id = id.strip()
        self._name = name.strip()
        self._borrowed: List[str] = []

    @property
    def id(self) -> str:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @property
    def borrowed_books(self) -> Tuple[str, ...]:
        return tuple(self._borrowed)

    def has_borrowed(self, book_id: str) -> bool:
        return book_id in self._borrowed

    def borrow_book(self, book_id: str) -> None:
        # Availability is checked by the Library before this is called
        self._borrowed.append(book_id)

    def return_book(self, book_id: str) -> bool:
        if book_id in self._borrowed:
            self._borrowed.remove(book_id)
            return True
        return False

    def __str__(self) -> str:
        return f"{self.name} ({self.id}) - Borrowed: {len(self._borrowed)}"

    def __repr__(self) -> str:
        return f"Member(id={self.id!r}, name={self.name!r})"

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "borrowed_books": list(self._borrowed)}
