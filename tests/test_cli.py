"""Tests for the feednorm-parse command."""

import json
from unittest.mock import patch

import pytest

from feednorm.cli.parse_feed import load_feed, main
from feednorm.config import ParserOptions
from feednorm.models import Feed
from feednorm.rss.fetch import TooManyRedirectsError, TransportError


@pytest.fixture(autouse=True)
def quiet_config(monkeypatch):
    monkeypatch.delenv("LOG_DIR", raising=False)
    monkeypatch.setenv("LOG_LEVEL", "WARNING")


class TestMain:
    """End to end through a file."""

    def test_prints_feed_json(self, feed_file, rss2_feed, capsys):
        code = main([feed_file(rss2_feed)])

        assert code == 0
        data = json.loads(capsys.readouterr().out)
        assert data["version"] == "1.0.0"
        assert data["feed_url"] == "https://example.com/feed.xml"

    def test_failure_exit_code(self, feed_file, capsys):
        code = main([feed_file("<html/>")])

        assert code == 1
        assert capsys.readouterr().out == ""

    @patch("feednorm.cli.parse_feed.parse_url")
    def test_max_redirects_flag(self, mock_parse_url, capsys):
        mock_parse_url.return_value = Feed(title="T")

        code = main(["https://example.com/feed", "--max-redirects", "0"])

        assert code == 0
        _, options = mock_parse_url.call_args.args
        assert options.max_redirects == 0


class TestLoadFeed:
    """Caller side retries."""

    @patch("feednorm.cli.parse_feed.parse_url")
    def test_transport_error_is_retried(self, mock_parse_url):
        mock_parse_url.side_effect = [TransportError("reset"), Feed(title="T")]

        feed = load_feed("https://example.com/feed", ParserOptions(), attempts=2)

        assert feed.title == "T"
        assert mock_parse_url.call_count == 2

    @patch("feednorm.cli.parse_feed.parse_url")
    def test_redirect_errors_are_not_retried(self, mock_parse_url):
        mock_parse_url.side_effect = TooManyRedirectsError("Too many redirects")

        with pytest.raises(TooManyRedirectsError):
            load_feed("https://example.com/feed", ParserOptions(), attempts=3)

        assert mock_parse_url.call_count == 1
