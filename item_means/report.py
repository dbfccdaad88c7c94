"""把普通平均分和阻尼平均分合并成一张表，供脚本输出使用。"""

import pandas as pd

from .config import check_damping
from .providers import RatingAccumulator, finish_model
from .ratings import RatingSource

REPORT_COLUMNS = ["movieId", "rating_count", "mean", "damped_mean"]


def build_item_report(source: RatingSource, damping: float) -> pd.DataFrame:
    """
    只遍历一次数据源，同时得到评分条数、普通平均分和阻尼平均分

    Args:
        source: 评分数据源
        damping: 阻尼系数

    Returns:
        包含 movieId、rating_count、mean、damped_mean 的 DataFrame，按 movieId 排序
    """
    damping = check_damping(damping)
    with source.stream() as ratings:
        acc = RatingAccumulator.from_ratings(ratings)

    plain = finish_model(acc.means())
    damped = finish_model(acc.damped_means(damping))

    report = plain.to_frame().merge(
        damped.to_frame().rename(columns={"mean": "damped_mean"}),
        on="movieId",
        how="inner",
    )
    report["rating_count"] = report["movieId"].map(acc.counts()).fillna(0).astype("int64")
    return report[REPORT_COLUMNS]
