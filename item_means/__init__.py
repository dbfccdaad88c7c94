"""
Item Mean Models
================

非个性化推荐用的物品平均分模型：
- 普通的物品平均分（ItemMeanModelProvider）
- 向全局平均分收缩的贝叶斯阻尼平均分（DampedItemMeanModelProvider）

评分数据由 RatingSource 提供，每次构建只读取一遍。
"""

from .config import DEFAULT_DAMPING, MeanConfig, check_damping
from .model import MISSING_MEAN, ItemMeanModel
from .providers import (
    DampedItemMeanModelProvider,
    ItemMeanModelProvider,
    RatingAccumulator,
    compute_damped_item_means,
    compute_item_means,
)
from .ratings import (
    CsvRatingSource,
    InMemoryRatingSource,
    Rating,
    RatingSource,
    SqliteRatingSource,
    clean_ratings,
)
from .report import build_item_report

__all__ = [
    "DEFAULT_DAMPING",
    "MISSING_MEAN",
    "CsvRatingSource",
    "DampedItemMeanModelProvider",
    "InMemoryRatingSource",
    "ItemMeanModel",
    "ItemMeanModelProvider",
    "MeanConfig",
    "Rating",
    "RatingAccumulator",
    "RatingSource",
    "SqliteRatingSource",
    "build_item_report",
    "check_damping",
    "clean_ratings",
    "compute_damped_item_means",
    "compute_item_means",
]
