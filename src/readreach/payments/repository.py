"""Repository for the Payment aggregate."""

from readreach.domain import readreach
from readreach.payments.payment import Payment
from readreach.shared.email import normalize_email

QUERY_LIMIT = 1000


def _newest_first(payments):
    return sorted(payments, key=lambda p: p.created_at, reverse=True)


@readreach.repository(part_of=Payment)
class PaymentRepository:
    def find_by_transaction_id(self, transaction_id: str) -> Payment | None:
        return self._dao.query.filter(transaction_id=transaction_id).all().first

    def find_by_email(self, email: str) -> list[Payment]:
        return _newest_first(
            self._dao.query.filter(email=normalize_email(email)).limit(QUERY_LIMIT).all().items
        )

    def find_all(self) -> list[Payment]:
        return _newest_first(self._dao.query.limit(QUERY_LIMIT).all().items)
