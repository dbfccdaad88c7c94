import logging
from pathlib import Path

import pandas as pd

from item_means import CsvRatingSource, MeanConfig, build_item_report

DATA_DIR = Path(__file__).parent / "data"
OUT_DIR = Path(__file__).parent / "output"

RATINGS_PATH = DATA_DIR / "ratings.csv"
MOVIES_PATH = DATA_DIR / "movies.csv"


def attach_titles(report: pd.DataFrame) -> pd.DataFrame:
    # movies.csv 不存在时只输出 movieId
    if not MOVIES_PATH.exists():
        return report
    movies = pd.read_csv(MOVIES_PATH)[["movieId", "title"]].drop_duplicates("movieId")
    return report.merge(movies, on="movieId", how="left")


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    OUT_DIR.mkdir(exist_ok=True)

    config = MeanConfig.from_env()
    report = build_item_report(CsvRatingSource(RATINGS_PATH), config.damping)
    report = attach_titles(report)

    # 阻尼对评分少的电影影响最大，看看被拉动最多的 20 部
    report["shift"] = report["damped_mean"] - report["mean"]
    most_shifted = report.reindex(report["shift"].abs().sort_values(ascending=False).index).head(20)

    print(f"\n=== Item means: {len(report)} items, damping={config.damping} ===")
    print(report.describe()[["rating_count", "mean", "damped_mean"]].to_string())

    print("\n=== Top 20 Most Shifted By Damping ===")
    print(most_shifted.to_string(index=False))

    out_path = OUT_DIR / "item_means.csv"
    report.to_csv(out_path, index=False)
    print("\nSaved outputs to:", out_path)


if __name__ == "__main__":
    main()
