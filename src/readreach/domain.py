"""ReadReach domain composition root.

A single Protean domain holds the User, Book, Order and Payment aggregates
so that payment completion and catalogue cleanup can touch orders inside
one unit of work.
"""

from protean.domain import Domain

from readreach.utils.logging import configure_logging, get_logger

# Configure logging for the application
configure_logging()

logger = get_logger(__name__)

readreach = Domain(name="readreach")
