"""
从评分数据计算物品平均分。

两个 provider 都只遍历一次评分数据，累加器都是每次调用新建的局部变量，
不同调用之间不共享任何可变状态。
"""

import logging
from typing import Dict, Iterable

from .config import MeanConfig, check_damping
from .model import ItemMeanModel
from .ratings import Rating, RatingSource

logger = logging.getLogger(__name__)


def _get_or_zero(values: Dict[int, float], item_id: int) -> float:
    # 累加器里还没有的物品按 0.0 处理
    return values.get(item_id, 0.0)


class RatingAccumulator:
    """
    单次遍历的评分累加器，同时记录每个物品和全局的评分和与条数

    条数用 float 保存，方便阻尼公式直接计算。
    """

    def __init__(self):
        self.item_sums: Dict[int, float] = {}
        self.item_counts: Dict[int, float] = {}
        self.global_sum = 0.0
        self.global_count = 0.0

    @classmethod
    def from_ratings(cls, ratings: Iterable[Rating]) -> "RatingAccumulator":
        acc = cls()
        for rating in ratings:
            acc.add(rating)
        return acc

    def add(self, rating: Rating) -> None:
        item_id = rating.item_id
        self.item_sums[item_id] = _get_or_zero(self.item_sums, item_id) + rating.value
        self.item_counts[item_id] = _get_or_zero(self.item_counts, item_id) + 1.0
        self.global_sum += rating.value
        self.global_count += 1.0

    @property
    def global_mean(self) -> float:
        # 没有任何评分时定义为 0.0
        return self.global_sum / self.global_count if self.global_count > 0 else 0.0

    def counts(self) -> Dict[int, int]:
        return {item_id: int(count) for item_id, count in self.item_counts.items()}

    def means(self) -> Dict[int, float]:
        return self.damped_means(0.0)

    def damped_means(self, damping: float) -> Dict[int, float]:
        """
        (item_sum + global_mean * damping) / (item_count + damping)

        damping 为 0 时就是普通平均分。
        """
        global_mean = self.global_mean
        logger.debug("global mean %.4f over %d ratings", global_mean, int(self.global_count))

        means: Dict[int, float] = {}
        for item_id, total in self.item_sums.items():
            count = _get_or_zero(self.item_counts, item_id)
            if count > 0:
                means[item_id] = (total + global_mean * damping) / (count + damping)
        return means


def compute_item_means(ratings: Iterable[Rating]) -> Dict[int, float]:
    """
    计算每个物品的算术平均分

    Args:
        ratings: 评分序列，只会被遍历一次；为空时返回空 dict

    Returns:
        新建的 item -> sum / count 映射
    """
    return RatingAccumulator.from_ratings(ratings).means()


def compute_damped_item_means(ratings: Iterable[Rating], damping: float) -> Dict[int, float]:
    """
    计算每个物品的贝叶斯阻尼平均分

    每个物品的分数为 (item_sum + global_mean * damping) / (item_count + damping)，
    相当于给每个物品额外加上 damping 条全局平均分的评分。
    damping 为 0 时等于普通平均分；没有任何评分时全局平均分取 0.0。

    Args:
        ratings: 评分序列，只会被遍历一次
        damping: 有限的非负阻尼系数

    Returns:
        新建的 item -> damped mean 映射

    Raises:
        ValueError: damping 为负数或不是有限值
    """
    damping = check_damping(damping)
    return RatingAccumulator.from_ratings(ratings).damped_means(damping)


def finish_model(means: Dict[int, float]) -> ItemMeanModel:
    logger.debug("item means: %s", means)
    logger.info("computed mean ratings for %d items", len(means))
    return ItemMeanModel(means)


class ItemMeanModelProvider:
    """用评分数据源构建普通平均分模型。"""

    def __init__(self, source: RatingSource):
        self.source = source

    def get(self) -> ItemMeanModel:
        # 数据源只在这一次遍历期间打开，出错时也会关闭
        with self.source.stream() as ratings:
            means = compute_item_means(ratings)
        return finish_model(means)


class DampedItemMeanModelProvider:
    """
    用评分数据源构建阻尼平均分模型

    Args:
        source: 评分数据源
        damping: 阻尼系数，负数或非有限值会在构造时直接报错
    """

    def __init__(self, source: RatingSource, damping: float):
        self.source = source
        self.damping = check_damping(damping)

    @classmethod
    def from_config(cls, source: RatingSource, config: MeanConfig) -> "DampedItemMeanModelProvider":
        return cls(source, config.damping)

    def get(self) -> ItemMeanModel:
        with self.source.stream() as ratings:
            means = compute_damped_item_means(ratings, self.damping)
        return finish_model(means)
