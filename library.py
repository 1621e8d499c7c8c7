import logging
from enum import Enum
from contextlib import contextmanager
from threading import RLock
from typing import Iterator, List, Optional, Dict, Any

from book import Book
from member import Member
from config import settings

logging.basicConfig(level=getattr(logging, settings.log_level, logging.WARNING))
logger = logging.getLogger(__name__)

REMOVAL_POLICIES = ("reject", "cascade")


class BorrowStatus(str, Enum):
    SUCCESS = "Borrowed successfully"
    MEMBER_NOT_FOUND = "Member not found"
    BOOK_NOT_FOUND = "Book not found"
    ALREADY_BORROWED = "Member already borrowed this book"
    NO_COPIES = "No copies available"

    @property
    def ok(self) -> bool:
        return self is BorrowStatus.SUCCESS

    def __str__(self) -> str:
        return self.value


class ReturnStatus(str, Enum):
    SUCCESS = "Returned successfully"
    MEMBER_NOT_FOUND = "Member not found"
    BOOK_NOT_FOUND = "Book not found"
    NOT_BORROWED = "Member did not borrow this book"

    @property
    def ok(self) -> bool:
        return self is ReturnStatus.SUCCESS

    def __str__(self) -> str:
        return self.value


class Library:
    """Manages the catalogue, the members and the loans between them.

    All state lives in memory for the lifetime of the instance. Every public
    method takes the instance lock, so a borrow or return is never observed
    half-applied by another thread sharing the same Library.
    """

    def __init__(self, removal_policy: Optional[str] = None) -> None:
        policy = (removal_policy or settings.removal_policy).lower()
        if policy not in REMOVAL_POLICIES:
            raise ValueError(f"Unknown removal policy: {policy!r}. Use one of {', '.join(REMOVAL_POLICIES)}.")
        self.removal_policy = policy
        self._books: Dict[str, Book] = {}
        self._members: Dict[str, Member] = {}
        self._lock = RLock()

    @contextmanager
    def transaction(self) -> Iterator["Library"]:
        """Hold the library lock across several calls so they apply as one step."""
        with self._lock:
            yield self

    # ------------------------- Book operations ------------------------- #
    def add_book(self, book: Book) -> bool:
        """Add a pre-constructed Book. Duplicate ids are rejected, never overwritten."""
        with self._lock:
            if book.id in self._books:
                logger.info(f"Rejected duplicate book id {book.id}")
                return False
            self._books[book.id] = book
            logger.info(f"Added book {book.id} ({book.total_copies} copies)")
            return True

    def remove_book(self, book_id: str) -> bool:
        with self._lock:
            if book_id not in self._books:
                return False
            holders = self._holders_of(book_id)
            if holders:
                if self.removal_policy == "reject":
                    logger.warning(f"Refused to remove book {book_id}: on loan to {', '.join(m.id for m in holders)}")
                    return False
                for member in holders:
                    while member.return_book(book_id):
                        pass
            del self._books[book_id]
            logger.info(f"Removed book {book_id}")
            return True

    def find_book(self, book_id: str) -> Optional[Book]:
        with self._lock:
            return self._books.get(book_id)

    def search_by_title(self, query: str) -> List[Book]:
        q = query.lower()
        with self._lock:
            return [b for b in self._books.values() if q in b.title.lower()]

    def search_by_author(self, query: str) -> List[Book]:
        q = query.lower()
        with self._lock:
            return [b for b in self._books.values() if q in b.author.lower()]

    def search_books(self, query: str) -> List[Book]:
        """Search for books by title or author."""
        q = query.lower()
        with self._lock:
            matches = [b for b in self._books.values() if q in b.title.lower() or q in b.author.lower()]
        return sorted(matches, key=lambda b: (b.title, b.id))

    def list_books(self) -> List[Book]:
        with self._lock:
            return sorted(self._books.values(), key=lambda b: (b.title, b.id))

    def add_copies(self, book_id: str, n: int) -> Optional[Book]:
        """Add copies to a book; returns the updated book, or None if it is unknown."""
        with self._lock:
            book = self._books.get(book_id)
            if not book:
                return None
            book.add_copies(n)
            logger.info(f"Added {n} copies to {book_id}: {book.available_copies}/{book.total_copies}")
            return book

    def remove_copies(self, book_id: str, n: int) -> Optional[Book]:
        with self._lock:
            book = self._books.get(book_id)
            if not book:
                return None
            book.remove_copies(n)
            logger.info(f"Removed up to {n} copies from {book_id}: {book.available_copies}/{book.total_copies}")
            return book

    # ------------------------- Member operations ------------------------- #
    def add_member(self, member: Member) -> bool:
        with self._lock:
            if member.id in self._members:
                logger.info(f"Rejected duplicate member id {member.id}")
                return False
            self._members[member.id] = member
            logger.info(f"Registered member {member.id}")
            return True

    def remove_member(self, member_id: str) -> bool:
        with self._lock:
            member = self._members.get(member_id)
            if not member:
                return False
            if member.borrowed_books:
                if self.removal_policy == "reject":
                    logger.warning(f"Refused to remove member {member_id}: {len(member.borrowed_books)} books on loan")
                    return False
                for book_id in member.borrowed_books:
                    member.return_book(book_id)
                    book = self._books.get(book_id)
                    if book:
                        book.return_copy()
            del self._members[member_id]
            logger.info(f"Removed member {member_id}")
            return True

    def find_member(self, member_id: str) -> Optional[Member]:
        with self._lock:
            return self._members.get(member_id)

    def list_members(self) -> List[Member]:
        with self._lock:
            return sorted(self._members.values(), key=lambda m: (m.name, m.id))

    # ------------------------- Borrow / Return ------------------------- #
    def borrow(self, member_id: str, book_id: str) -> BorrowStatus:
        with self._lock:
            member = self._members.get(member_id)
            if not member:
                return BorrowStatus.MEMBER_NOT_FOUND
            book = self._books.get(book_id)
            if not book:
                return BorrowStatus.BOOK_NOT_FOUND
            if member.has_borrowed(book_id):
                return BorrowStatus.ALREADY_BORROWED
            if not book.borrow():
                logger.info(f"No copies of {book_id} left for {member_id}")
                return BorrowStatus.NO_COPIES
            member.borrow_book(book_id)
            logger.info(f"{member_id} borrowed {book_id}")
            return BorrowStatus.SUCCESS

    def return_book(self, member_id: str, book_id: str) -> ReturnStatus:
        with self._lock:
            member = self._members.get(member_id)
            if not member:
                return ReturnStatus.MEMBER_NOT_FOUND
            book = self._books.get(book_id)
            if not book:
                return ReturnStatus.BOOK_NOT_FOUND
            if not member.return_book(book_id):
                return ReturnStatus.NOT_BORROWED
            # The copy may have been written off by remove_copies meanwhile
            if not book.return_copy():
                logger.warning(f"Return of {book_id} by {member_id} exceeded the copy total")
            logger.info(f"{member_id} returned {book_id}")
            return ReturnStatus.SUCCESS

    # ------------------------- Reporting ------------------------- #
    def get_statistics(self) -> Dict[str, Any]:
        """Get library statistics."""
        with self._lock:
            books = list(self._books.values())
            return {
                "total_books": len(books),
                "unique_authors": len({b.author for b in books}),
                "total_copies": sum(b.total_copies for b in books),
                "available_copies": sum(b.available_copies for b in books),
                "active_loans": sum(len(m.borrowed_books) for m in self._members.values()),
                "total_members": len(self._members),
            }

    # ------------------------- Utilities ------------------------- #
    def _holders_of(self, book_id: str) -> List[Member]:
        return [m for m in self._members.values() if m.has_borrowed(book_id)]


def seed_sample_data(library: Library) -> Library:
    """Fill a library with the demo catalogue and members."""
    library.add_book(Book("B001", "Introduction to Algorithms", "Cormen", 3))
    library.add_book(Book("B002", "Clean Code", "Robert C. Martin", 2))
    library.add_book(Book("B003", "Effective Java", "Joshua Bloch", 1))
    library.add_member(Member("M001", "Rishi"))
    library.add_member(Member("M002", "Anjali"))
    return library
