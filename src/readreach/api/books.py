"""FastAPI endpoints for the catalogue."""

from fastapi import APIRouter, Depends
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from readreach.api.schemas import (
    AddBookRequest,
    BookRemovedResponse,
    BookResponse,
    PublishStatusRequest,
    StatusResponse,
    UpdateBookRequest,
)
from readreach.auth.access import AuthContext, require
from readreach.catalogue.book import Book
from readreach.catalogue.management import AddBook, ChangePublishStatus, RemoveBook, UpdateBookDetails

LATEST_BOOKS = 4

router = APIRouter(tags=["books"])


def _books(books) -> list[BookResponse]:
    return [BookResponse.model_validate(book) for book in books]


# --- Public catalogue ---


@router.get("/latest-book", response_model=list[BookResponse])
async def latest_books() -> list[BookResponse]:
    return _books(current_domain.repository_for(Book).find_latest(LATEST_BOOKS))


@router.get("/all-books", response_model=list[BookResponse])
async def published_books() -> list[BookResponse]:
    return _books(current_domain.repository_for(Book).find_published())


@router.get("/bookById/{book_id}", response_model=BookResponse | None)
async def book_by_id(book_id: str) -> BookResponse | None:
    try:
        book = current_domain.repository_for(Book).get(book_id)
    except ObjectNotFoundError:
        return None
    return BookResponse.model_validate(book)


# --- Admin ---


@router.get("/books", response_model=list[BookResponse])
async def all_books(ctx: AuthContext = Depends(require("books:list_all"))) -> list[BookResponse]:
    return _books(current_domain.repository_for(Book).find_all())


@router.delete("/delete-book/{book_id}", response_model=BookRemovedResponse)
async def delete_book(
    book_id: str, ctx: AuthContext = Depends(require("books:delete"))
) -> BookRemovedResponse:
    orders_removed = current_domain.process(RemoveBook(book_id=book_id), asynchronous=False)
    return BookRemovedResponse(orders_removed=orders_removed)


# --- Librarian ---


@router.get("/librarian-book", response_model=list[BookResponse])
async def librarian_books(ctx: AuthContext = Depends(require("books:list_mine"))) -> list[BookResponse]:
    return _books(current_domain.repository_for(Book).find_by_librarian(ctx.user.email))


@router.post("/add-book", status_code=201, response_model=BookResponse)
async def add_book(body: AddBookRequest, ctx: AuthContext = Depends(require("books:add"))) -> BookResponse:
    command = AddBook(
        title=body.title,
        author=body.author,
        image=body.image,
        description=body.description,
        category=body.category,
        price=body.price,
        quantity=body.quantity,
        librarian_email=ctx.user.email,
        librarian_name=body.librarian_name or ctx.user.name,
        published_status=body.published_status,
    )
    book_id = current_domain.process(command, asynchronous=False)
    return BookResponse.model_validate(current_domain.repository_for(Book).get(book_id))


@router.patch("/book-update/{book_id}", response_model=StatusResponse)
async def update_book(
    book_id: str,
    body: UpdateBookRequest,
    ctx: AuthContext = Depends(require("books:update")),
) -> StatusResponse:
    command = UpdateBookDetails(book_id=book_id, **body.model_dump(exclude_none=True))
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@router.patch("/publish-status-update/{book_id}", response_model=StatusResponse)
async def update_publish_status(
    book_id: str,
    body: PublishStatusRequest,
    ctx: AuthContext = Depends(require("books:publish")),
) -> StatusResponse:
    command = ChangePublishStatus(book_id=book_id, published_status=body.published_status)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()
