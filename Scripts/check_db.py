from pathlib import Path
import sqlite3
from typing import Dict

BASE = Path(__file__).resolve().parent.parent
DB_PATH = BASE / "data" / "movielens.db"


def table_counts(conn: sqlite3.Connection) -> Dict[str, int]:
    """列出所有表及其行数"""
    tables = conn.execute("SELECT name FROM sqlite_master WHERE type='table' ORDER BY name;").fetchall()
    return {t: conn.execute(f"SELECT COUNT(*) FROM {t};").fetchone()[0] for (t,) in tables}


def item_means_summary(conn: sqlite3.Connection) -> Dict[str, float]:
    """
    汇总 item_means 表

    Returns:
        物品数、评分总数，以及 mean / damped_mean 的最小值和最大值
    """
    row = conn.execute(
        """
        SELECT COUNT(*), COALESCE(SUM(rating_count), 0),
               MIN(mean), MAX(mean), MIN(damped_mean), MAX(damped_mean)
        FROM item_means
        """
    ).fetchone()
    keys = ["n_items", "n_ratings", "mean_min", "mean_max", "damped_min", "damped_max"]
    return dict(zip(keys, row))


def main():
    print("DB file:", DB_PATH)
    if not DB_PATH.exists():
        raise FileNotFoundError(f"Database not found: {DB_PATH}. 先运行 Scripts/build_db.py 生成数据库")

    conn = sqlite3.connect(DB_PATH)
    try:
        counts = table_counts(conn)
        for name, n in counts.items():
            print(f"{name}: {n} rows")

        if "item_means" in counts:
            for key, value in item_means_summary(conn).items():
                print(f"{key}: {value}")
    finally:
        conn.close()


if __name__ == "__main__":
    main()
