from __future__ import annotations

import threading
from unittest.mock import MagicMock, patch
from urllib.parse import parse_qs, urlparse

import pytest
import requests

from spacenews_tui.client import NewsAPIClient, build_first_page_url
from spacenews_tui.config import API_BASE_URL
from spacenews_tui.errors import DecodeError, InvalidURLError, NetworkError


@pytest.fixture
def client():
    c = NewsAPIClient()
    yield c
    c.close()


def _response(payload=None, status=200, json_error=None):
    resp = MagicMock()
    resp.status_code = status
    if status >= 400:
        resp.raise_for_status.side_effect = requests.HTTPError(f"{status} Server Error")
    if json_error is not None:
        resp.json.side_effect = json_error
    else:
        resp.json.return_value = payload
    return resp


@pytest.mark.parametrize("query", ["mars", "  mars  ", "artemis ii", "\tlunar lander\n"])
def test_first_page_url_includes_trimmed_search(query):
    url = build_first_page_url(query)
    params = parse_qs(urlparse(url).query)
    assert url.startswith(API_BASE_URL + "?")
    assert params["limit"] == ["10"]
    assert params["search"] == [query.strip()]


@pytest.mark.parametrize("query", ["", "   ", "\n\t"])
def test_first_page_url_omits_blank_search(query):
    url = build_first_page_url(query)
    assert "limit=10" in url
    assert "search" not in url


def test_first_page_url_literal():
    assert "search=mars" in build_first_page_url(" mars ")


def test_fetch_first_page(client, envelope_dict):
    with patch.object(client.session, "get") as mock_get:
        mock_get.return_value = _response(envelope_dict)
        envelope = client.fetch("  rocket ")

    url = mock_get.call_args[0][0]
    assert parse_qs(urlparse(url).query) == {"limit": ["10"], "search": ["rocket"]}
    assert mock_get.call_args[1]["timeout"] == client.timeout
    assert envelope.count == 120
    assert [a.id for a in envelope.results] == [1, 2, 3]


def test_fetch_uses_cursor_verbatim(client, envelope_dict):
    cursor = "https://api.spaceflightnewsapi.net/v4/articles/?limit=10&offset=20&search=moon"
    with patch.object(client.session, "get") as mock_get:
        mock_get.return_value = _response(envelope_dict)
        client.fetch("ignored query", page_url=cursor)

    assert mock_get.call_args[0][0] == cursor


def test_fetch_rejects_non_http_cursor(client):
    with patch.object(client.session, "get") as mock_get:
        with pytest.raises(InvalidURLError):
            client.fetch("", page_url="ftp://example.com/articles")
    mock_get.assert_not_called()


def test_fetch_transport_failure_is_network_error(client):
    cause = requests.ConnectionError("connection refused")
    with patch.object(client.session, "get", side_effect=cause):
        with pytest.raises(NetworkError) as excinfo:
            client.fetch("")
    assert excinfo.value.cause is cause
    assert "connection refused" in excinfo.value.description


def test_fetch_http_error_status_is_network_error(client):
    with patch.object(client.session, "get", return_value=_response(status=503)):
        with pytest.raises(NetworkError):
            client.fetch("")


def test_fetch_invalid_json_is_decode_error(client):
    resp = _response(json_error=ValueError("Expecting value"))
    with patch.object(client.session, "get", return_value=resp):
        with pytest.raises(DecodeError):
            client.fetch("")


def test_fetch_bad_timestamp_is_decode_error(client, envelope_dict):
    envelope_dict["results"][1]["published_at"] = "06/06/2024"
    with patch.object(client.session, "get", return_value=_response(envelope_dict)):
        with pytest.raises(DecodeError) as excinfo:
            client.fetch("")
    assert "06/06/2024" in excinfo.value.description


def test_fetch_missing_results_is_decode_error(client):
    with patch.object(client.session, "get", return_value=_response({"count": 1})):
        with pytest.raises(DecodeError):
            client.fetch("")


def test_each_thread_gets_its_own_session(client):
    main_session = client.session
    assert client.session is main_session

    seen = []
    worker = threading.Thread(target=lambda: seen.append(client.session))
    worker.start()
    worker.join()

    assert seen[0] is not main_session
    assert seen[0].headers["Accept"] == "application/json"


def test_close_closes_every_thread_session(client):
    sessions = [client.session]
    worker = threading.Thread(target=lambda: sessions.append(client.session))
    worker.start()
    worker.join()

    with patch.object(sessions[0], "close") as close_main, patch.object(
        sessions[1], "close"
    ) as close_worker:
        client.close()
    close_main.assert_called_once()
    close_worker.assert_called_once()
