"""
Shared fixtures. The database is an in-memory SQLite database whose schema is
created here, standing in for the instance's own (externally managed) tables.
"""

from datetime import datetime, timezone

import pytest
from sqlalchemy import create_engine

from janitor_server import database
from janitor_server.orm import Post
from janitor_server.store import ThumbnailStore
from thumbnail_janitor.client import PictrsClient
from thumbnail_janitor.deletion import DeletionStatus
from thumbnail_janitor.models.deletion import DeletionOutcome

INSTANCE_HOST = "https://instance.example/"

NOW = datetime(2026, 6, 15, 12, 0, 0, tzinfo=timezone.utc)
OLD = datetime(2025, 1, 1, 0, 0, 0, tzinfo=timezone.utc)
RECENT = datetime(2026, 6, 1, 0, 0, 0, tzinfo=timezone.utc)


def thumbnail_url(n: int, host: str = INSTANCE_HOST, extension: str = "png") -> str:
    """
    A URL for a thumbnail with a UUID-shaped alias, unique per n.
    """
    alias = f"{n:08x}-4f0e-4b8e-9a43-6c1d2e3f4a5b.{extension}"
    return f"{host}pictrs/image/{alias}"


class FakePictrsClient(PictrsClient):
    """
    A pict-rs client that never touches the network. Responds with DELETED
    unless told otherwise for a given alias, and remembers what it was asked.
    """

    def __init__(self, host="pictrs:8080", api_key="test_key", timeout=1.0):
        super().__init__(host=host, api_key=api_key, timeout=timeout)
        self.responses: dict[str, DeletionStatus] = {}
        self.default = DeletionStatus.DELETED
        self.calls: list[str] = []

    def delete(self, alias: str) -> DeletionOutcome:
        self.calls.append(alias)
        status = self.responses.get(alias, self.default)

        if status == DeletionStatus.FAILED:
            return DeletionOutcome(
                alias=alias, status=status, http_status=500, body="Internal Error"
            )

        return DeletionOutcome(
            alias=alias,
            status=status,
            http_status=200 if status == DeletionStatus.DELETED else 404,
        )


@pytest.fixture
def make_url():
    return thumbnail_url


@pytest.fixture
def engine():
    engine = create_engine("sqlite://")
    database.Base.metadata.create_all(engine)

    yield engine

    engine.dispose()


@pytest.fixture
def session(engine):
    session = database.get_session(engine)

    yield session

    session.close()


@pytest.fixture
def add_posts(session):
    """
    Factory fixture: add posts with the given thumbnail URLs and publication
    time, returning their IDs.
    """

    def add(urls, recent=False) -> list[int]:
        published = RECENT if recent else OLD
        posts = [Post(thumbnail_url=url, published=published) for url in urls]
        session.add_all(posts)
        session.commit()
        return [post.id for post in posts]

    return add


@pytest.fixture
def get_thumbnail(session):
    def get(post_id: int):
        return session.get(Post, post_id, populate_existing=True).thumbnail_url

    return get


@pytest.fixture
def store(session):
    return ThumbnailStore(
        session=session,
        instance_host=INSTANCE_HOST,
        min_age_months=3,
        clock=lambda: NOW,
    )


@pytest.fixture
def fake_client():
    client = FakePictrsClient()

    yield client

    client.close()


@pytest.fixture
def fake_client_class():
    return FakePictrsClient


ENVIRONMENT_KEYS = [
    "INSTANCE_HOST",
    "CHECK_INTERVAL",
    "THUMBNAIL_MIN_AGE_MONTHS",
    "QUERY_LIMIT",
    "DATABASE_URI",
    "PICTRS_HOST",
    "PICTRS_API_KEY",
    "PICTRS_TIMEOUT",
    "DELETE_ON_NOT_FOUND",
    "LOG_LEVEL",
    "SOFT_TIMEOUT",
    "SQL_ECHO",
    "DEBUG",
]


@pytest.fixture
def clean_environment(monkeypatch):
    """
    Remove any janitor configuration from the environment.
    """

    for key in ENVIRONMENT_KEYS:
        monkeypatch.delenv(key, raising=False)

    return monkeypatch
