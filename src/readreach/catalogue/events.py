"""Domain events for the Book aggregate."""

from protean.fields import DateTime, Float, Identifier, String

from readreach.domain import readreach


@readreach.event(part_of="Book")
class BookAdded:
    """A librarian added a book to the catalogue."""

    __version__ = 1

    book_id: Identifier(required=True)
    title: String(required=True)
    librarian_email: String(required=True)
    price: Float(required=True)
    added_at: DateTime(required=True)


@readreach.event(part_of="Book")
class BookDetailsUpdated:
    """Descriptive fields of a book were edited."""

    __version__ = 1

    book_id: Identifier(required=True)
    updated_fields: String(required=True)


@readreach.event(part_of="Book")
class BookPublishStatusChanged:
    """A book moved between draft and published."""

    __version__ = 1

    book_id: Identifier(required=True)
    previous_status: String(required=True)
    new_status: String(required=True)
