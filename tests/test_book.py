import pytest

from book import Book


def test_new_book_starts_fully_available():
    book = Book("B001", "Intro", "X", 3)
    assert book.total_copies == 3
    assert book.available_copies == 3
    assert book.on_loan == 0

def test_negative_copies_are_clamped():
    book = Book("B001", "Intro", "X", -4)
    assert book.total_copies == 0
    assert book.available_copies == 0

def test_fields_are_stripped_and_read_only():
    book = Book(" B001 ", "  Clean Code ", " Robert C. Martin", 1)
    assert book.id == "B001"
    assert book.title == "Clean Code"
    assert book.author == "Robert C. Martin"
    with pytest.raises(AttributeError):
        book.title = "Other"

def test_borrow_until_empty():
    book = Book("B001", "Intro", "X", 2)
    assert book.borrow() is True
    assert book.borrow() is True
    assert book.borrow() is False
    assert book.available_copies == 0
    assert book.total_copies == 2

def test_return_copy_never_exceeds_total():
    book = Book("B001", "Intro", "X", 1)
    assert book.return_copy() is False
    assert book.available_copies == 1
    book.borrow()
    assert book.return_copy() is True
    assert book.available_copies == 1

def test_add_copies_ignores_non_positive():
    book = Book("B001", "Intro", "X", 1)
    book.add_copies(0)
    book.add_copies(-2)
    assert (book.total_copies, book.available_copies) == (1, 1)
    book.add_copies(2)
    assert (book.total_copies, book.available_copies) == (3, 3)

def test_remove_copies_prefers_available_copies():
    book = Book("B001", "Intro", "X", 3)
    book.borrow()
    book.remove_copies(2)
    assert book.total_copies == 1
    assert book.available_copies == 0
    assert book.on_loan == 1

def test_remove_copies_clamps_at_zero():
    book = Book("B001", "Intro", "X", 2)
    book.borrow()
    assert (book.total_copies, book.available_copies) == (2, 1)
    book.remove_copies(5)
    assert book.total_copies == 0
    assert book.available_copies == 0

def test_remove_copies_ignores_non_positive():
    book = Book("B001", "Intro", "X", 2)
    book.remove_copies(0)
    book.remove_copies(-1)
    assert (book.total_copies, book.available_copies) == (2, 2)

def test_str_and_to_dict():
    book = Book("B001", "Intro", "X", 3)
    assert str(book) == "[B001] Intro by X (Available: 3/3)"
    assert book.to_dict() == {
        "id": "B001",
        "title": "Intro",
        "author": "X",
        "total_copies": 3,
        "available_copies": 3,
    }

def test_copy_counters_are_read_only():
    book = Book("B001", "Intro", "X", 2)
    with pytest.raises(AttributeError):
        book.available_copies = 99
    with pytest.raises(AttributeError):
        book.total_copies = 0
    assert (book.total_copies, book.available_copies) == (2, 2)
