"""Tests for the HTTP parse service."""

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from feednorm.rss.fetch import TooManyRedirectsError
from feednorm.server import app


@pytest.fixture
def client():
    return TestClient(app)


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"


class TestParseBody:
    """POST /parse with the document as body."""

    def test_returns_normalized_feed(self, client, rss2_feed):
        response = client.post(
            "/parse", content=rss2_feed.encode("utf-8"), headers={"content-type": "application/rss+xml"}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["title"] == "Example News"
        assert data["items"][0]["summary"] == "Hello & world"

    def test_unrecognized_document(self, client):
        response = client.post("/parse", content=b"<html/>")

        assert response.status_code == 422
        assert "not recognized" in response.json()["detail"]

    def test_malformed_document(self, client):
        response = client.post("/parse", content=b"<rss")

        assert response.status_code == 422


class TestParseUrl:
    """GET /parse?url=..."""

    @patch("feednorm.api.fetch_url")
    def test_fetches_and_parses(self, mock_fetch, client, atom_feed):
        mock_fetch.return_value = atom_feed.encode("utf-8")

        response = client.get("/parse", params={"url": "https://example.org/atom.xml"})

        assert response.status_code == 200
        assert response.json()["items"][0]["author"] == {"name": "John Smith"}

    @patch("feednorm.api.fetch_url")
    def test_fetch_failure_is_bad_gateway(self, mock_fetch, client):
        mock_fetch.side_effect = TooManyRedirectsError("Too many redirects")

        response = client.get("/parse", params={"url": "https://example.org/atom.xml"})

        assert response.status_code == 502
        assert response.json()["detail"] == "Too many redirects"

    def test_unsupported_scheme(self, client):
        response = client.get("/parse", params={"url": "file:///etc/passwd"})

        assert response.status_code == 400

    def test_url_is_required(self, client):
        assert client.get("/parse").status_code == 422

    @patch("feednorm.server.parse_url")
    def test_other_value_errors_are_not_reported_as_bad_url(self, mock_parse_url, client):
        mock_parse_url.side_effect = ValueError("tags: Input should be a valid list")

        with pytest.raises(ValueError):
            client.get("/parse", params={"url": "https://example.org/atom.xml"})
