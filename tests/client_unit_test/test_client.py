"""
Tests for the pict-rs delete client. The HTTP session is mocked out.
"""

from unittest.mock import MagicMock, patch

import pytest
import requests

from thumbnail_janitor.client import API_KEY_HEADER, PictrsClient, base_url_from_host
from thumbnail_janitor.deletion import DeletionStatus

ALIAS = "0b6f8a2e-4f0e-4b8e-9a43-6c1d2e3f4a5b.png"


def mock_response(status_code: int, text: str = "") -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.text = text
    return response


@pytest.fixture
def client():
    client = PictrsClient(host="pictrs:8080", api_key="secret", timeout=5.0)

    yield client

    client.close()


@pytest.mark.parametrize(
    "host, expected",
    [
        ("pictrs:8080", "http://pictrs:8080"),
        ("pictrs:8080/", "http://pictrs:8080"),
        ("https://images.example", "https://images.example"),
        ("http://127.0.0.1:8080/", "http://127.0.0.1:8080"),
    ],
)
def test_base_url_from_host(host, expected):
    assert base_url_from_host(host) == expected


def test_api_key_header_on_session(client):
    assert client.session.headers[API_KEY_HEADER] == "secret"


def test_delete_ok(client):
    with patch.object(client.session, "post", return_value=mock_response(200)) as post:
        outcome = client.delete(ALIAS)

    post.assert_called_once_with(
        "http://pictrs:8080/internal/delete", params={"alias": ALIAS}, timeout=5.0
    )

    assert outcome.status == DeletionStatus.DELETED
    assert outcome.alias == ALIAS
    assert outcome.http_status == 200


def test_delete_not_found(client):
    with patch.object(client.session, "post", return_value=mock_response(404)):
        outcome = client.delete(ALIAS)

    assert outcome.status == DeletionStatus.NOT_FOUND
    assert outcome.http_status == 404


@pytest.mark.parametrize("status_code", [400, 401, 500, 503])
def test_delete_other_status_fails(client, status_code):
    response = mock_response(status_code, text="something went wrong")

    with patch.object(client.session, "post", return_value=response):
        outcome = client.delete(ALIAS)

    assert outcome.status == DeletionStatus.FAILED
    assert outcome.http_status == status_code
    assert outcome.body == "something went wrong"


@pytest.mark.parametrize(
    "error",
    [
        requests.ConnectionError("connection refused"),
        requests.Timeout("timed out"),
    ],
)
def test_delete_transport_error_fails_without_raising(client, error):
    with patch.object(client.session, "post", side_effect=error):
        outcome = client.delete(ALIAS)

    assert outcome.status == DeletionStatus.FAILED
    assert outcome.http_status is None
    assert str(error) in outcome.body


def test_context_manager_closes_session():
    client = PictrsClient(host="pictrs:8080", api_key="secret")

    with patch.object(client.session, "close") as close:
        with client:
            pass

    close.assert_called_once()
