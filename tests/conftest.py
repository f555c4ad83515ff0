import os
from pathlib import Path

import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Pytest hook to run before collecting tests.

    Initialise the ReadReach domain and push its domain_context, so that
    `current_domain` is available to every test and fixture.
    """
    os.environ["PROTEAN_ENV"] = session.config.option.env

    from readreach.domain import readreach

    readreach.init()
    readreach.domain_context().push()


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/bdd/" in test_path:
            item.add_marker(pytest.mark.bdd)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(scope="session", autouse=True)
def setup_db(request):
    from readreach.domain import readreach
    from readreach.utils.db import drop_db, setup_db

    setup_db(readreach)

    yield

    drop_db(readreach)


@pytest.fixture(autouse=True)
def run_around_tests():
    """Fixture to automatically cleanup infrastructure after every test"""
    yield

    from protean import current_domain

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    for _, broker in current_domain.brokers.items():
        broker._data_reset()

    current_domain.event_store.store._data_reset()


# ---------------------------------------------------------------------------
# HTTP fixtures: an application wired with in-memory collaborators
# ---------------------------------------------------------------------------
@pytest.fixture()
def settings():
    from readreach.settings import Settings

    return Settings(env="test", client_domain="http://client.test")


@pytest.fixture()
def verifier():
    from readreach.auth.fake_adapter import FakeTokenVerifier

    return FakeTokenVerifier()


@pytest.fixture()
def gateway():
    from readreach.payments.gateway.fake_adapter import FakeGateway

    return FakeGateway()


@pytest.fixture()
def client(settings, verifier, gateway):
    from fastapi.testclient import TestClient
    from readreach.app import create_app

    return TestClient(create_app(settings=settings, verifier=verifier, gateway=gateway))


@pytest.fixture()
def login(verifier):
    """Register ``email`` with ``role`` and return bearer headers for it."""
    from protean import current_domain
    from readreach.identity.registration import find_or_create_user
    from readreach.identity.roles import ChangeUserRole

    def _login(email, role="user", name=None):
        find_or_create_user(email, name=name)
        if role != "user":
            current_domain.process(ChangeUserRole(email=email, role=role), asynchronous=False)
        return {"Authorization": f"Bearer {verifier.issue(email)}"}

    return _login


# ---------------------------------------------------------------------------
# Catalogue and order builders
# ---------------------------------------------------------------------------
@pytest.fixture()
def make_book():
    """Add a book through the catalogue command and return its id."""
    from protean import current_domain
    from readreach.catalogue.management import AddBook

    def _make_book(
        librarian_email="librarian@example.com",
        title="Dune",
        price=19.99,
        published_status="published",
    ):
        command = AddBook(
            title=title,
            author="Frank Herbert",
            category="Science Fiction",
            price=price,
            quantity=2,
            librarian_email=librarian_email,
            librarian_name="Libby",
            published_status=published_status,
        )
        return current_domain.process(command, asynchronous=False)

    return _make_book


@pytest.fixture()
def make_order(make_book):
    """Place an order for a published book and return the order id."""
    from protean import current_domain
    from readreach.ordering.placement import PlaceOrder

    def _make_order(email="reader@example.com", book_id=None):
        command = PlaceOrder(
            book_id=book_id or make_book(),
            email=email,
            customer_name="Reader",
            phone="+1-555-0100",
            address="1 Library Lane",
        )
        return current_domain.process(command, asynchronous=False)

    return _make_order
