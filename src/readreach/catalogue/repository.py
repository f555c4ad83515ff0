"""Repository for the Book aggregate."""

from readreach.catalogue.book import Book, PublishStatus
from readreach.domain import readreach
from readreach.shared.email import normalize_email

QUERY_LIMIT = 1000


def _newest_first(books):
    return sorted(books, key=lambda b: b.added_at, reverse=True)


@readreach.repository(part_of=Book)
class BookRepository:
    def find_published(self) -> list[Book]:
        return self._dao.query.filter(published_status=PublishStatus.PUBLISHED.value).limit(QUERY_LIMIT).all().items

    def find_by_librarian(self, email: str) -> list[Book]:
        return (
            self._dao.query.filter(librarian_email=normalize_email(email)).limit(QUERY_LIMIT).all().items
        )

    def find_latest(self, count: int) -> list[Book]:
        return _newest_first(self.find_published())[:count]

    def find_all(self) -> list[Book]:
        return self._dao.query.limit(QUERY_LIMIT).all().items

    def delete(self, book: Book) -> None:
        self._dao.delete(book)
