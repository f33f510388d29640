"""
Load simulation script for the Leaderboard API.

Continuously submits scores as random players, fetches the top list, and
queries the submitting player's rank to exercise both cache paths.

Usage:
    python simulate_load.py [leaderboard_id]
"""

import random
import sys
import time

import requests

API_BASE_URL = "http://localhost:8000/api/leaderboards"


def submit_score(player_id: str, leaderboard_id: int, score: int, base_url: str = API_BASE_URL):
    """POST a score for the given player; returns the entry id or None."""
    try:
        resp = requests.post(
            f"{base_url}/entries",
            json={"leaderboard_id": leaderboard_id, "score": score},
            headers={"X-Player-Id": player_id},
            timeout=10,
        )
        print(f"  ↑ submit  player={player_id}  score={score}  status={resp.status_code}")
        if resp.ok:
            return resp.json().get("entry_id")
    except requests.RequestException as e:
        print(f"  ✗ submit failed: {e}")
    return None


def get_top_entries(leaderboard_id: int, base_url: str = API_BASE_URL):
    """GET the leaderboard's top list."""
    try:
        resp = requests.get(f"{base_url}/{leaderboard_id}/entries/top", timeout=10)
        data = resp.json()
        print(f"  ↓ top     entries={len(data.get('entries', []))}")
        return data
    except requests.RequestException as e:
        print(f"  ✗ top failed: {e}")
        return {}


def get_player_rank(player_id: str, leaderboard_id: int, base_url: str = API_BASE_URL):
    """GET the rank of a specific player."""
    try:
        resp = requests.get(f"{base_url}/{leaderboard_id}/ranks/{player_id}", timeout=10)
        data = resp.json()
        print(f"  ↓ rank    player={player_id}  rank={data.get('rank', '?')}")
        return data
    except requests.RequestException as e:
        print(f"  ✗ rank failed: {e}")
        return {}


def run_cycle(leaderboard_id: int, num_players: int = 1_000, base_url: str = API_BASE_URL):
    player_id = str(random.randint(1, num_players))
    submit_score(player_id, leaderboard_id, random.randint(100, 10_000), base_url)
    get_top_entries(leaderboard_id, base_url)
    get_player_rank(player_id, leaderboard_id, base_url)


if __name__ == "__main__":
    target = int(sys.argv[1]) if len(sys.argv) > 1 else 1
    print("🚀 Load simulation started — press Ctrl+C to stop\n")
    cycle = 0
    try:
        while True:
            cycle += 1
            print(f"── Cycle {cycle} ──")
            run_cycle(target)
            time.sleep(random.uniform(0.5, 2))
    except KeyboardInterrupt:
        print("\n⏹ Simulation stopped")
