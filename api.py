from datetime import datetime, timezone
from typing import List, Optional, Dict, Any

from fastapi import FastAPI, HTTPException, Depends, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field, field_validator, model_validator

from book import Book
from member import Member
from library import Library, BorrowStatus, ReturnStatus, seed_sample_data
from config import settings
from utils.validators import IdValidator, TextValidator


# Same rules the shell applies to typed input
def _valid_id(value: str) -> str:
    value = IdValidator.normalize_id(value)
    if not IdValidator.is_valid_id(value):
        raise ValueError(f"must be a single word of at most {IdValidator.MAX_LENGTH} characters")
    return value


# --- Models ---
class BookModel(BaseModel):
    id: str
    title: str
    author: str
    total_copies: int
    available_copies: int

class BookCreateModel(BaseModel):
    id: str
    title: str
    author: str
    copies: int = Field(default=1, ge=0)

    @field_validator("id")
    @classmethod
    def _check_id(cls, value: str) -> str:
        return _valid_id(value)

    @field_validator("title", "author")
    @classmethod
    def _check_text(cls, value: str) -> str:
        value = TextValidator.sanitize_text(value)
        if not TextValidator.validate_required(value):
            raise ValueError("must not be blank")
        return value

class CopiesModel(BaseModel):
    """Exactly one of ``add`` / ``remove`` must be given."""
    add: int | None = Field(default=None, gt=0)
    remove: int | None = Field(default=None, gt=0)

    @model_validator(mode="after")
    def _one_direction(self):
        if (self.add is None) == (self.remove is None):
            raise ValueError("Provide exactly one of 'add' or 'remove'")
        return self

class MemberModel(BaseModel):
    id: str
    name: str
    borrowed_books: List[str]

class MemberCreateModel(BaseModel):
    id: str
    name: str

    @field_validator("id")
    @classmethod
    def _check_id(cls, value: str) -> str:
        return _valid_id(value)

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        value = TextValidator.sanitize_text(value)
        if not TextValidator.validate_name(value):
            raise ValueError("must contain at least one letter")
        return value

class LoanRequest(BaseModel):
    member_id: str
    book_id: str

class StatusModel(BaseModel):
    status: str

class StatsModel(BaseModel):
    total_books: int
    unique_authors: int
    total_copies: int
    available_copies: int
    active_loans: int
    total_members: int


# Status -> HTTP code for borrow/return outcomes
_STATUS_CODES = {
    BorrowStatus.SUCCESS: 200,
    BorrowStatus.MEMBER_NOT_FOUND: 404,
    BorrowStatus.BOOK_NOT_FOUND: 404,
    BorrowStatus.ALREADY_BORROWED: 409,
    BorrowStatus.NO_COPIES: 409,
    ReturnStatus.SUCCESS: 200,
    ReturnStatus.MEMBER_NOT_FOUND: 404,
    ReturnStatus.BOOK_NOT_FOUND: 404,
    ReturnStatus.NOT_BORROWED: 409,
}


def get_library(request: Request) -> Library:
    """Dependency returning the Library owned by the running app."""
    return request.app.state.library

def _status_response(status) -> StatusModel:
    code = _STATUS_CODES[status]
    if code != 200:
        raise HTTPException(status_code=code, detail=str(status))
    return StatusModel(status=str(status))


def create_app(library: Optional[Library] = None) -> FastAPI:
    """Build the HTTP service around one shared Library instance."""
    if library is None:
        library = Library()
        if settings.seed_sample_data:
            seed_sample_data(library)

    app = FastAPI(title=settings.app_name, version=settings.app_version, debug=settings.debug)
    app.state.library = library

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # --- Health ---
    @app.get("/health")
    def health(lib: Library = Depends(get_library)) -> Dict[str, Any]:
        stats = lib.get_statistics()
        return {
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "version": settings.app_version,
            "total_books": stats["total_books"],
            "total_members": stats["total_members"],
        }

    # --- Books ---
    @app.get("/books", response_model=List[BookModel])
    def list_books(
        title: Optional[str] = Query(default=None, description="Case-insensitive title substring"),
        author: Optional[str] = Query(default=None, description="Case-insensitive author substring"),
        lib: Library = Depends(get_library),
    ):
        books = lib.list_books()
        if title is not None:
            ids = {b.id for b in lib.search_by_title(title)}
            books = [b for b in books if b.id in ids]
        if author is not None:
            ids = {b.id for b in lib.search_by_author(author)}
            books = [b for b in books if b.id in ids]
        return [b.to_dict() for b in books]

    @app.post("/books", response_model=BookModel, status_code=201)
    def add_book(payload: BookCreateModel, lib: Library = Depends(get_library)):
        book = Book(payload.id, payload.title, payload.author, payload.copies)
        if not lib.add_book(book):
            raise HTTPException(status_code=409, detail=f"Book with id {book.id} already exists.")
        return book.to_dict()

    @app.get("/books/{book_id}", response_model=BookModel)
    def get_book(book_id: str, lib: Library = Depends(get_library)):
        book = lib.find_book(book_id)
        if not book:
            raise HTTPException(status_code=404, detail="Book not found")
        return book.to_dict()

    @app.delete("/books/{book_id}")
    def delete_book(book_id: str, lib: Library = Depends(get_library)) -> Dict[str, str]:
        with lib.transaction():
            if not lib.find_book(book_id):
                raise HTTPException(status_code=404, detail="Book not found")
            if not lib.remove_book(book_id):
                raise HTTPException(status_code=409, detail="Book has copies on loan")
        return {"detail": f"Book {book_id} removed"}

    @app.post("/books/{book_id}/copies", response_model=BookModel)
    def change_copies(book_id: str, payload: CopiesModel, lib: Library = Depends(get_library)):
        with lib.transaction():
            if payload.add is not None:
                book = lib.add_copies(book_id, payload.add)
            else:
                book = lib.remove_copies(book_id, payload.remove)
            if not book:
                raise HTTPException(status_code=404, detail="Book not found")
            return book.to_dict()

    # --- Members ---
    @app.get("/members", response_model=List[MemberModel])
    def list_members(lib: Library = Depends(get_library)):
        return [m.to_dict() for m in lib.list_members()]

    @app.post("/members", response_model=MemberModel, status_code=201)
    def add_member(payload: MemberCreateModel, lib: Library = Depends(get_library)):
        member = Member(payload.id, payload.name)
        if not lib.add_member(member):
            raise HTTPException(status_code=409, detail=f"Member with id {member.id} already exists.")
        return member.to_dict()

    @app.get("/members/{member_id}", response_model=MemberModel)
    def get_member(member_id: str, lib: Library = Depends(get_library)):
        member = lib.find_member(member_id)
        if not member:
            raise HTTPException(status_code=404, detail="Member not found")
        return member.to_dict()

    @app.delete("/members/{member_id}")
    def delete_member(member_id: str, lib: Library = Depends(get_library)) -> Dict[str, str]:
        with lib.transaction():
            if not lib.find_member(member_id):
                raise HTTPException(status_code=404, detail="Member not found")
            if not lib.remove_member(member_id):
                raise HTTPException(status_code=409, detail="Member still has books on loan")
        return {"detail": f"Member {member_id} removed"}

    # --- Loans ---
    @app.post("/loans", response_model=StatusModel)
    def borrow(payload: LoanRequest, lib: Library = Depends(get_library)):
        return _status_response(lib.borrow(payload.member_id, payload.book_id))

    @app.post("/returns", response_model=StatusModel)
    def return_book(payload: LoanRequest, lib: Library = Depends(get_library)):
        return _status_response(lib.return_book(payload.member_id, payload.book_id))

    @app.get("/stats", response_model=StatsModel)
    def stats(lib: Library = Depends(get_library)):
        return lib.get_statistics()

    return app


app = create_app()
