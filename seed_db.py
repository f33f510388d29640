"""
Database seeding script for the Leaderboard service.

Populates the database with:
  - players (player_1 … player_N, the first one an admin)
  - a few leaderboards with different bounds and top sizes
  - one entry per player per leaderboard with a random in-bounds score

Usage:
    python seed_db.py
"""

import random
import time

from sqlalchemy import delete
from sqlalchemy.orm import Session

from database import create_tables, engine as default_engine
from models import Leaderboard, LeaderboardEntry, Player

LEADERBOARDS = [
    {"name": "Classic", "min_score": 0, "max_score": 10_000, "num_of_top_scores": 10},
    {"name": "Speedrun", "min_score": 1, "max_score": 3_600, "num_of_top_scores": 5},
    {"name": "Endless", "num_of_top_scores": 25},
]


def seed(engine=default_engine, num_players: int = 1_000, seed_value=None):
    """Run all seeding steps sequentially; returns the number of entries created."""
    rng = random.Random(seed_value)
    create_tables(engine)

    with Session(engine) as db:
        # ── Step 0: Clean Slate ──────────────────────────────────
        print("⏳ Cleaning existing data...")
        db.execute(delete(LeaderboardEntry))
        db.execute(delete(Leaderboard))
        db.execute(delete(Player))
        db.commit()

        # ── Step 1: Players ──────────────────────────────────────
        print(f"⏳ Inserting {num_players:,} players …")
        start = time.time()
        players = [
            Player(id=str(i), username=f"player_{i}", is_admin=(i == 1))
            for i in range(1, num_players + 1)
        ]
        player_ids = [p.id for p in players]
        db.add_all(players)
        db.commit()
        print(f"   ✓ Players inserted in {time.time() - start:.1f}s")

        # ── Step 2: Leaderboards ─────────────────────────────────
        print(f"⏳ Inserting {len(LEADERBOARDS)} leaderboards …")
        leaderboards = [Leaderboard(**fields) for fields in LEADERBOARDS]
        db.add_all(leaderboards)
        db.commit()

        # ── Step 3: Entries ──────────────────────────────────────
        print("⏳ Inserting entries …")
        start = time.time()
        created = 0
        for leaderboard in leaderboards:
            upper = min(leaderboard.max_score, leaderboard.min_score + 100_000)
            for player_id in player_ids:
                db.add(LeaderboardEntry(
                    leaderboard=leaderboard,
                    player_id=player_id,
                    score=rng.randint(leaderboard.min_score, upper),
                ))
                created += 1
        db.commit()
        print(f"   ✓ {created:,} entries inserted in {time.time() - start:.1f}s")

    print("\n🎉 Database seeding complete!")
    return created


if __name__ == "__main__":
    seed()
