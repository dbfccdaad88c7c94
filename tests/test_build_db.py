"""End-to-end tests for the database scripts."""

from __future__ import annotations

import sqlite3
import sys
from pathlib import Path

import pandas as pd
import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from item_means import MeanConfig
from Scripts import build_db, check_db


@pytest.fixture()
def data_dir(tmp_path: Path) -> Path:
    pd.DataFrame(
        {
            "userId": [1, 2, 1, 3],
            "movieId": [1, 1, 2, 3],
            "rating": [3.0, 5.0, 4.0, 1.0],
            "timestamp": [0, 0, 0, 0],
        }
    ).to_csv(tmp_path / "ratings.csv", index=False)
    pd.DataFrame(
        {
            "movieId": [1, 2, 3, 3],
            "title": ["Toy Story (1995)", "Jumanji (1995)", "Heat (1995)", "Heat (1995)"],
            "genres": ["Animation", "Adventure", "Action", "Action"],
        }
    ).to_csv(tmp_path / "movies.csv", index=False)
    return tmp_path


def test_build_database_writes_item_means(data_dir: Path) -> None:
    db_path = data_dir / "movielens.db"
    report = build_db.build_database(
        ratings_path=data_dir / "ratings.csv",
        movies_path=data_dir / "movies.csv",
        db_path=db_path,
        config=MeanConfig(damping=2.0),
    )
    assert len(report) == 3

    conn = sqlite3.connect(db_path)
    try:
        rows = conn.execute(
            "SELECT movieId, rating_count, mean, damped_mean FROM item_means ORDER BY movieId"
        ).fetchall()
        n_movies = conn.execute("SELECT COUNT(*) FROM movies").fetchone()[0]
        counts = check_db.table_counts(conn)
        summary = check_db.item_means_summary(conn)
    finally:
        conn.close()

    assert [r[:2] for r in rows] == [(1, 2), (2, 1), (3, 1)]
    assert rows[0][2] == pytest.approx(4.0)
    assert rows[2][3] == pytest.approx((1.0 + 3.25 * 2) / 3)
    assert n_movies == 3
    assert counts == {"item_means": 3, "movies": 3}
    assert summary["n_items"] == 3
    assert summary["n_ratings"] == 4
    assert summary["mean_min"] == pytest.approx(1.0)


def test_build_database_requires_inputs(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        build_db.build_database(
            ratings_path=tmp_path / "ratings.csv",
            movies_path=tmp_path / "movies.csv",
            db_path=tmp_path / "movielens.db",
            config=MeanConfig(),
        )
