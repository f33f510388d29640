"""
Tests for the load simulation client.
"""

from unittest.mock import MagicMock, patch

import requests

import simulate_load


def response(status_code, payload):
    resp = MagicMock()
    resp.status_code = status_code
    resp.ok = status_code < 400
    resp.json.return_value = payload
    return resp


def test_submit_score_sends_player_header():
    with patch("simulate_load.requests.post", return_value=response(200, {"entry_id": 7})) as post:
        assert simulate_load.submit_score("42", 1, 500, base_url="http://api") == 7

    post.assert_called_once_with(
        "http://api/entries",
        json={"leaderboard_id": 1, "score": 500},
        headers={"X-Player-Id": "42"},
        timeout=10,
    )


def test_submit_score_rejected():
    with patch("simulate_load.requests.post", return_value=response(400, {"detail": "bad"})):
        assert simulate_load.submit_score("42", 1, -5) is None


def test_submit_score_connection_error():
    with patch("simulate_load.requests.post", side_effect=requests.ConnectionError("refused")):
        assert simulate_load.submit_score("42", 1, 500) is None


def test_reads_return_payload():
    top = {"leaderboard_id": 1, "entries": []}
    with patch("simulate_load.requests.get", return_value=response(200, top)) as get:
        assert simulate_load.get_top_entries(1, base_url="http://api") == top

    get.assert_called_once_with("http://api/1/entries/top", timeout=10)


def test_reads_swallow_connection_errors():
    with patch("simulate_load.requests.get", side_effect=requests.ConnectionError("refused")):
        assert simulate_load.get_top_entries(1) == {}
        assert simulate_load.get_player_rank("42", 1) == {}
