"""构建完成后的物品平均分模型。"""

from types import MappingProxyType
from typing import FrozenSet, Mapping

import pandas as pd

# 查询没有出现过的物品时返回的分数
MISSING_MEAN = 0.0


class ItemMeanModel:
    """
    物品平均分模型，构建后不可修改

    模型只保存 item -> mean 的结果，不保留构建时用到的评分数据源。
    查询未知物品时 mean_of 返回 MISSING_MEAN（0.0），不会抛异常。
    """

    __slots__ = ("_means",)

    def __init__(self, means: Mapping[int, float]):
        # 复制一份，避免和构建器内部的 dict 共享
        self._means = MappingProxyType(dict(means))

    @property
    def means(self) -> Mapping[int, float]:
        """只读的 item -> mean 映射"""
        return self._means

    def mean_of(self, item_id: int) -> float:
        return self._means.get(item_id, MISSING_MEAN)

    def has_item(self, item_id: int) -> bool:
        return item_id in self._means

    def item_ids(self) -> FrozenSet[int]:
        return frozenset(self._means)

    def to_frame(self) -> pd.DataFrame:
        """
        转成 DataFrame，方便写入数据库或 CSV

        Returns:
            包含 movieId 和 mean 两列、按 movieId 排序的 DataFrame
        """
        frame = pd.DataFrame(
            {
                "movieId": pd.Series(list(self._means.keys()), dtype="int64"),
                "mean": pd.Series(list(self._means.values()), dtype="float64"),
            }
        )
        return frame.sort_values("movieId").reset_index(drop=True)

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._means

    def __len__(self) -> int:
        return len(self._means)

    def __repr__(self) -> str:
        return f"ItemMeanModel(n_items={len(self._means)})"
