"""阻尼系数配置。"""

import math
import os
from dataclasses import dataclass
from typing import Mapping, Optional

# 可以通过环境变量覆盖默认阻尼系数
DAMPING_ENV_VAR = "ITEM_MEAN_DAMPING"
DEFAULT_DAMPING = 5.0


def check_damping(damping: float) -> float:
    """
    检查阻尼系数是否合法

    Args:
        damping: 阻尼系数，即假设每个物品额外拥有的“全局平均分”评分条数

    Returns:
        转成 float 的阻尼系数

    Raises:
        ValueError: 阻尼系数为负数、NaN 或无穷大
    """
    damping = float(damping)
    if not math.isfinite(damping) or damping < 0:
        raise ValueError(f"damping must be a finite non-negative number, got {damping}")
    return damping


@dataclass(frozen=True)
class MeanConfig:
    """平均分模型的配置，目前只有阻尼系数。构造时即校验。"""

    damping: float = DEFAULT_DAMPING

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        check_damping(self.damping)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "MeanConfig":
        """
        从环境变量读取配置，未设置时使用默认值

        Args:
            environ: 环境变量映射，默认为 os.environ

        Returns:
            校验过的 MeanConfig
        """
        env = os.environ if environ is None else environ
        raw = env.get(DAMPING_ENV_VAR, "").strip()
        return cls(damping=float(raw)) if raw else cls()
