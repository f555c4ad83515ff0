"""Book aggregate: a catalogue entry owned by the librarian who listed it."""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Integer, String, Text

from readreach.domain import readreach
from readreach.catalogue.events import BookAdded, BookDetailsUpdated, BookPublishStatusChanged
from readreach.shared.email import normalize_email


class PublishStatus(Enum):
    DRAFT = "draft"
    PUBLISHED = "published"


# Fields a librarian may edit after listing
EDITABLE_FIELDS = ("title", "author", "image", "description", "category", "price", "quantity")


@readreach.aggregate
class Book:
    title = String(required=True, max_length=255)
    author = String(max_length=255)
    image = String(max_length=2048)
    description = Text()
    category = String(max_length=100)
    price = Float(required=True, min_value=0.0)
    quantity = Integer(default=1, min_value=0)
    librarian_email = String(required=True, max_length=254)
    librarian_name = String(max_length=255)
    published_status = String(max_length=20, choices=PublishStatus, default=PublishStatus.DRAFT.value)
    added_at = DateTime()

    @classmethod
    def create(cls, title, price, librarian_email, published_status=PublishStatus.DRAFT.value, **details):
        now = datetime.now(UTC)
        book = cls(
            title=title,
            price=price,
            librarian_email=normalize_email(librarian_email),
            published_status=published_status,
            added_at=now,
            **details,
        )
        book.raise_(
            BookAdded(
                book_id=book.id,
                title=book.title,
                librarian_email=book.librarian_email,
                price=book.price,
                added_at=now,
            )
        )
        return book

    def is_published(self) -> bool:
        return self.published_status == PublishStatus.PUBLISHED.value

    def update_details(self, **changes):
        unknown = sorted(set(changes) - set(EDITABLE_FIELDS))
        if unknown:
            raise ValidationError({"book": [f"Fields cannot be edited: {', '.join(unknown)}"]})

        applied = {field: value for field, value in changes.items() if value is not None}
        if not applied:
            return

        for field, value in applied.items():
            setattr(self, field, value)

        self.raise_(BookDetailsUpdated(book_id=self.id, updated_fields=",".join(sorted(applied))))

    def set_publish_status(self, status):
        valid = {s.value for s in PublishStatus}
        if status not in valid:
            raise ValidationError({"published_status": [f"Unknown publish status '{status}'"]})

        if status == self.published_status:
            return

        previous = self.published_status
        self.published_status = status
        self.raise_(
            BookPublishStatusChanged(
                book_id=self.id,
                previous_status=previous,
                new_status=status,
            )
        )
