import random

import numpy as np
import matplotlib.pyplot as plt
import seaborn as sns

from game_logic import Difficulty, generate_grid


def grid_mine_mask(grid) -> np.ndarray:
    return np.array([[cell.is_mine for cell in row] for row in grid], dtype=bool)


def count_neighbor_mines(mine_mask: np.ndarray) -> np.ndarray:
    padded = np.pad(mine_mask.astype(np.int8), 1)
    rows, cols = mine_mask.shape
    numbers = np.zeros((rows, cols), dtype=np.int8)
    for dr in (-1, 0, 1):
        for dc in (-1, 0, 1):
            if dr == 0 and dc == 0:
                continue
            numbers += padded[1 + dr:1 + dr + rows, 1 + dc:1 + dc + cols]
    return numbers


def count_mine_clusters(mine_mask: np.ndarray) -> int:
    rows, cols = mine_mask.shape
    visited = np.zeros_like(mine_mask, dtype=bool)
    clusters = 0

    for r in range(rows):
        for c in range(cols):
            if not mine_mask[r, c] or visited[r, c]:
                continue
            clusters += 1
            stack = [(r, c)]
            visited[r, c] = True

            while stack:
                cr, cc = stack.pop()
                for nr in range(max(0, cr - 1), min(rows, cr + 2)):
                    for nc in range(max(0, cc - 1), min(cols, cc + 2)):
                        if mine_mask[nr, nc] and not visited[nr, nc]:
                            visited[nr, nc] = True
                            stack.append((nr, nc))

    return clusters


def collect_stats(difficulty: Difficulty, boards: int, seed: int | None = 42, dimensions=None):
    if boards <= 0:
        raise ValueError("boards must be positive")
    rng = random.Random(seed)
    cols, rows = dimensions or difficulty.size

    openings_per_board = []
    clusters_per_board = []
    value_counts = np.zeros(9, dtype=np.int64)
    mine_accum = np.zeros((rows, cols), dtype=np.float64)

    for _ in range(boards):
        mines = grid_mine_mask(generate_grid(difficulty, (cols, rows), rng))
        numbers = count_neighbor_mines(mines)
        openings_per_board.append(int(((~mines) & (numbers == 0)).sum()))
        value_counts += np.bincount(numbers[~mines].ravel(), minlength=9)
        clusters_per_board.append(count_mine_clusters(mines))
        mine_accum += mines

    return {
        "openings": openings_per_board,
        "clusters": clusters_per_board,
        "values": value_counts,
        "density": mine_accum / float(boards),
    }


def generate_report(difficulty: Difficulty, boards: int, output_path: str, seed: int | None = 42, dimensions=None):
    stats = collect_stats(difficulty, boards, seed, dimensions)

    sns.set_theme(style="whitegrid")
    fig = plt.figure(figsize=(12, 9))
    fig.suptitle(f"{difficulty.label}: {boards} generated boards")
    axes = fig.subplots(2, 2)

    axes[0, 0].hist(stats["openings"], bins="auto", color="#4C78A8", edgecolor="black")
    axes[0, 0].set_title("Zero Cells per Board")
    axes[0, 0].set_xlabel("Cells with no neighboring mine")
    axes[0, 0].set_ylabel("Count of boards")

    xs = np.arange(9)
    axes[0, 1].bar(xs, stats["values"], color="#F58518", edgecolor="black")
    axes[0, 1].set_title("Distribution of Numbers in Cells (non-mine)")
    axes[0, 1].set_xlabel("Number shown (0-8)")
    axes[0, 1].set_xticks(xs)
    axes[0, 1].set_ylabel("Cell count")

    axes[1, 0].hist(stats["clusters"], bins="auto", color="#54A24B", edgecolor="black")
    axes[1, 0].set_title("Number of Mine Clusters per Board (8-connected)")
    axes[1, 0].set_xlabel("Clusters per board")
    axes[1, 0].set_ylabel("Count of boards")

    sns.heatmap(
        stats["density"],
        ax=axes[1, 1],
        cmap="magma",
        square=True,
        cbar_kws={"label": "Mine probability"},
    )
    axes[1, 1].set_title("Mine Density per Cell (across boards)")
    axes[1, 1].set_xlabel("Column")
    axes[1, 1].set_ylabel("Row")

    fig.tight_layout()
    fig.savefig(output_path)
    plt.close(fig)
    return stats
