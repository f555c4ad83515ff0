"""Repository for the Order aggregate."""

from readreach.domain import readreach
from readreach.ordering.order import Order, OrderStatus
from readreach.shared.email import normalize_email

QUERY_LIMIT = 1000


def _newest_first(orders):
    return sorted(orders, key=lambda o: o.created_at, reverse=True)


@readreach.repository(part_of=Order)
class OrderRepository:
    def find_by_purchaser(self, email: str) -> list[Order]:
        return self._dao.query.filter(email=normalize_email(email)).limit(QUERY_LIMIT).all().items

    def find_recent_by_purchaser(self, email: str, count: int) -> list[Order]:
        return _newest_first(self.find_by_purchaser(email))[:count]

    def find_delivered_by_purchaser(self, email: str) -> list[Order]:
        return (
            self._dao.query.filter(email=normalize_email(email), status=OrderStatus.DELIVERED.value)
            .limit(QUERY_LIMIT)
            .all()
            .items
        )

    def find_by_librarian(self, email: str) -> list[Order]:
        return self._dao.query.filter(librarian_email=normalize_email(email)).limit(QUERY_LIMIT).all().items

    def find_by_book(self, book_id: str) -> list[Order]:
        return self._dao.query.filter(book_id=book_id).limit(QUERY_LIMIT).all().items

    def find_all(self) -> list[Order]:
        return self._dao.query.limit(QUERY_LIMIT).all().items

    def delete(self, order: Order) -> None:
        self._dao.delete(order)
