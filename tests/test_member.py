from member import Member


def test_borrow_and_return_book():
    member = Member("M001", "Rishi")
    member.borrow_book("B001")
    member.borrow_book("B002")
    assert member.borrowed_books == ("B001", "B002")
    assert member.has_borrowed("B001")

    assert member.return_book("B001") is True
    assert member.borrowed_books == ("B002",)
    assert member.has_borrowed("B001") is False

def test_return_unknown_book():
    member = Member("M001", "Rishi")
    assert member.return_book("B001") is False
    assert member.borrowed_books == ()

def test_borrowed_books_is_a_read_only_view():
    member = Member("M001", "Rishi")
    member.borrow_book("B001")
    view = member.borrowed_books
    assert isinstance(view, tuple)
    member.borrow_book("B002")
    assert view == ("B001",)

def test_str_and_to_dict():
    member = Member(" M001 ", " Rishi ")
    member.borrow_book("B001")
    assert str(member) == "Rishi (M001) - Borrowed: 1"
    assert member.to_dict() == {"id": "M001", "name": "Rishi", "borrowed_books": ["B001"]}
