"""
评分数据源。

每个数据源通过 stream() 提供一次性的评分迭代器。stream() 是上下文管理器，
离开 with 块时（包括遍历中途出错）会释放底层的文件或数据库连接。
"""

import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import ContextManager, Iterable, Iterator, Optional, Protocol, Tuple, Union

import pandas as pd

REQUIRED_COLUMNS = {"movieId", "rating"}
# MovieLens 的评分范围
DEFAULT_RATING_RANGE: Tuple[float, float] = (0.5, 5.0)


@dataclass(frozen=True)
class Rating:
    """单条评分记录。"""

    item_id: int
    value: float
    user_id: Optional[int] = None


class RatingSource(Protocol):
    def stream(self) -> ContextManager[Iterator[Rating]]:
        ...


def clean_ratings(
    ratings: pd.DataFrame,
    rating_range: Optional[Tuple[float, float]] = DEFAULT_RATING_RANGE,
) -> pd.DataFrame:
    """
    清理评分数据，移除 movieId 或 rating 为空的行和超出范围的评分

    userId 只是附带信息，缺失时保留该行。

    Args:
        ratings: 原始评分 DataFrame（可以是分块读取的一块）
        rating_range: 合法评分范围 (low, high)，为 None 时不过滤

    Returns:
        清理后的评分 DataFrame
    """
    ratings = ratings.dropna(subset=["movieId", "rating"])
    if rating_range is not None:
        low, high = rating_range
        ratings = ratings[(ratings["rating"] >= low) & (ratings["rating"] <= high)]
    return ratings


class InMemoryRatingSource:
    """内存中的评分列表，可以反复 stream()。"""

    def __init__(self, ratings: Iterable[Rating]):
        self._ratings = list(ratings)

    @classmethod
    def from_pairs(cls, pairs: Iterable[Tuple[int, float]]) -> "InMemoryRatingSource":
        return cls(Rating(item_id=item_id, value=value) for item_id, value in pairs)

    @contextmanager
    def stream(self) -> Iterator[Iterator[Rating]]:
        yield iter(self._ratings)

    def __len__(self) -> int:
        return len(self._ratings)


class CsvRatingSource:
    """
    分块读取 MovieLens 格式的 ratings.csv

    Args:
        path: ratings.csv 路径
        chunksize: 每块读取的行数
        rating_range: 合法评分范围，为 None 时不过滤
    """

    def __init__(
        self,
        path: Union[str, Path],
        chunksize: int = 100_000,
        rating_range: Optional[Tuple[float, float]] = DEFAULT_RATING_RANGE,
    ):
        self.path = Path(path)
        self.chunksize = chunksize
        self.rating_range = rating_range

    @contextmanager
    def stream(self) -> Iterator[Iterator[Rating]]:
        if not self.path.exists():
            raise FileNotFoundError(f"找不到 {self.path}，请把 ratings.csv 放进 data/ 目录")
        reader = pd.read_csv(self.path, chunksize=self.chunksize)
        try:
            yield self._iter_ratings(reader)
        finally:
            reader.close()

    def _iter_ratings(self, chunks: Iterable[pd.DataFrame]) -> Iterator[Rating]:
        for chunk in chunks:
            missing = REQUIRED_COLUMNS - set(chunk.columns)
            if missing:
                raise ValueError(f"{self.path.name} 缺少列: {sorted(missing)}")

            chunk = clean_ratings(chunk, self.rating_range)
            has_user = "userId" in chunk.columns
            for row in chunk.itertuples(index=False):
                yield Rating(
                    item_id=int(row.movieId),
                    value=float(row.rating),
                    user_id=int(row.userId) if has_user and pd.notna(row.userId) else None,
                )


class SqliteRatingSource:
    """
    从 SQLite 的评分表读取评分，表需要包含 userId、movieId、rating 三列

    和 CsvRatingSource 一样，movieId 或 rating 为 NULL 的行以及超出范围的评分会被跳过。

    Args:
        db_path: 数据库文件路径
        table: 评分表名
        rating_range: 合法评分范围，为 None 时不过滤
    """

    def __init__(
        self,
        db_path: Union[str, Path],
        table: str = "ratings",
        rating_range: Optional[Tuple[float, float]] = DEFAULT_RATING_RANGE,
    ):
        self.db_path = Path(db_path)
        self.table = table
        self.rating_range = rating_range

    def _query(self) -> Tuple[str, Tuple[float, ...]]:
        # 表名不能用参数绑定，按 SQL 标识符规则加引号
        table = '"' + self.table.replace('"', '""') + '"'
        sql = f"SELECT userId, movieId, rating FROM {table} WHERE movieId IS NOT NULL AND rating IS NOT NULL"
        if self.rating_range is None:
            return sql, ()
        return sql + " AND rating BETWEEN ? AND ?", tuple(self.rating_range)

    @contextmanager
    def stream(self) -> Iterator[Iterator[Rating]]:
        if not self.db_path.exists():
            raise FileNotFoundError(f"Database not found: {self.db_path}")
        conn = sqlite3.connect(self.db_path)
        try:
            sql, params = self._query()
            cursor = conn.execute(sql, params)
            yield (
                Rating(
                    item_id=int(movie_id),
                    value=float(value),
                    user_id=int(user_id) if user_id is not None else None,
                )
                for user_id, movie_id, value in cursor
            )
        finally:
            conn.close()
