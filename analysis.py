import logging
from pathlib import Path

import matplotlib.pyplot as plt
import pandas as pd

from item_means import CsvRatingSource, MeanConfig, build_item_report

BASE = Path(__file__).parent
DATA_DIR = BASE / "data"
OUT_DIR = BASE / "output"
RATINGS_PATH = DATA_DIR / "ratings.csv"


def plot_shrinkage(report: pd.DataFrame, damping: float) -> Path:
    """
    画出普通平均分和阻尼平均分随评分条数的变化

    Args:
        report: build_item_report 的输出
        damping: 用到的阻尼系数，写在标题里

    Returns:
        保存的图片路径
    """
    OUT_DIR.mkdir(exist_ok=True)
    fig_path = OUT_DIR / "item_means_shrinkage.png"

    plt.figure()
    plt.scatter(report["rating_count"], report["mean"], s=4, alpha=0.4, label="mean")
    plt.scatter(report["rating_count"], report["damped_mean"], s=4, alpha=0.4, label="damped_mean")
    plt.xscale("log")
    plt.xlabel("rating_count")
    plt.ylabel("rating")
    plt.title(f"damping = {damping:g}")
    plt.legend()
    plt.tight_layout()
    plt.savefig(fig_path, dpi=200)
    plt.close()
    return fig_path


def main():
    logging.basicConfig(level=logging.INFO)
    config = MeanConfig.from_env()
    report = build_item_report(CsvRatingSource(RATINGS_PATH), config.damping)

    # 评分少的电影：阻尼平均分的离散程度应明显小于普通平均分
    sparse = report[report["rating_count"] < 10]
    print(f"items: {len(report)}, sparse items (<10 ratings): {len(sparse)}")
    print(sparse[["mean", "damped_mean"]].std().to_string())

    fig_path = plot_shrinkage(report, config.damping)
    print(f"Saved Figure -> {fig_path}")


if __name__ == "__main__":
    main()
