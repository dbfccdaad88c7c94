import logging
from pathlib import Path
import sqlite3
from typing import Optional

import pandas as pd

from item_means import CsvRatingSource, MeanConfig, build_item_report

BASE = Path(__file__).resolve().parent.parent

# schema.sql 和本脚本放在同一个 Scripts 目录下
SCHEMA_PATH = BASE / "Scripts" / "schema.sql"

DATA_DIR = BASE / "data"
DB_PATH = DATA_DIR / "movielens.db"

RATINGS_PATH = DATA_DIR / "ratings.csv"
MOVIES_PATH = DATA_DIR / "movies.csv"

logger = logging.getLogger(__name__)


def build_database(
    ratings_path: Path = RATINGS_PATH,
    movies_path: Path = MOVIES_PATH,
    db_path: Path = DB_PATH,
    schema_path: Path = SCHEMA_PATH,
    config: Optional[MeanConfig] = None,
) -> pd.DataFrame:
    """
    计算每部电影的平均分并写入 SQLite 数据库

    Args:
        ratings_path: ratings.csv 路径
        movies_path: movies.csv 路径
        db_path: 输出的数据库文件
        schema_path: 建表脚本
        config: 平均分配置，默认从环境变量读取

    Returns:
        写入 item_means 表的 DataFrame

    Raises:
        FileNotFoundError: 输入文件或建表脚本不存在
    """
    # 检查必需的输入文件是否存在
    if not ratings_path.exists():
        raise FileNotFoundError(f"找不到 {ratings_path} —— 请把 ratings.csv 放进 data/ 目录")
    if not movies_path.exists():
        raise FileNotFoundError(f"找不到 {movies_path} —— 请把 movies.csv 放进 data/ 目录")
    if not schema_path.exists():
        raise FileNotFoundError(f"找不到 {schema_path} —— 请确认 schema.sql 在 Scripts/ 目录下")

    config = config or MeanConfig.from_env()
    logger.info("building item means from %s with damping %.2f", ratings_path, config.damping)

    # 分块读取评分 -> 普通平均分 + 阻尼平均分
    report = build_item_report(CsvRatingSource(ratings_path), config.damping)
    movies = pd.read_csv(movies_path)
    movies = movies[["movieId", "title", "genres"]].drop_duplicates("movieId")

    conn = sqlite3.connect(db_path)
    try:
        conn.executescript(schema_path.read_text(encoding="utf-8"))
        # 表已经由 schema.sql 建好，这里只追加数据
        movies.to_sql("movies", conn, if_exists="append", index=False)
        report.to_sql("item_means", conn, if_exists="append", index=False)
        conn.commit()
    finally:
        conn.close()

    return report


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    DATA_DIR.mkdir(exist_ok=True)

    report = build_database()
    print(f"✅ OK: built sqlite db -> {DB_PATH} ({len(report)} items)")

    # 抽查评分最多的 5 部电影
    conn = sqlite3.connect(DB_PATH)
    try:
        sample = pd.read_sql_query(
            """
            SELECT m.title, s.rating_count, s.mean, s.damped_mean
            FROM item_means s
            LEFT JOIN movies m ON m.movieId = s.movieId
            ORDER BY s.rating_count DESC
            LIMIT 5
            """,
            conn,
        )
        print("Sample:\n", sample.to_string(index=False))
    finally:
        conn.close()


if __name__ == "__main__":
    main()
