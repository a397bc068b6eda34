"""
AVL Tree Demo -- Rotation cases, height growth against the AVL bounds,
rotation cost per operation, and successor-copy removal.

Generates:
- viz/*.png -- Individual visualization files
- report.pdf -- Comprehensive PDF report
"""

import sys
import logging
from pathlib import Path
from typing import Dict, List, Tuple

sys.path.insert(0, str(Path(__file__).resolve().parent / "src"))

import numpy as np
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
from matplotlib.backends.backend_pdf import PdfPages

from avl_tree import AVLTree

SEED = 42
np.random.seed(SEED)

VIZ_DIR = Path(__file__).parent / "viz"
VIZ_DIR.mkdir(exist_ok=True)

COLORS = {
    "blue": "#3498db",
    "red": "#e74c3c",
    "orange": "#f39c12",
    "green": "#27ae60",
    "purple": "#9b59b6",
    "dark": "#2c3e50",
}

HEIGHT_SIZES = [2 ** k - 1 for k in range(1, 14)]
ROTATION_N = 2000


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
class RotationCounter(logging.Handler):
    """Tallies the rotation records emitted by the ``avl_tree`` logger."""

    def __init__(self) -> None:
        super().__init__(level=logging.DEBUG)
        self.counts: Dict[str, int] = {"left": 0, "right": 0}

    def emit(self, record: logging.LogRecord) -> None:
        message = record.getMessage()
        for direction in self.counts:
            if message.startswith(f"rotate {direction}"):
                self.counts[direction] += 1

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    def reset(self) -> None:
        for direction in self.counts:
            self.counts[direction] = 0


def attach_counter() -> RotationCounter:
    counter = RotationCounter()
    tree_logger = logging.getLogger("avl_tree")
    tree_logger.addHandler(counter)
    tree_logger.setLevel(logging.DEBUG)
    return counter


def detach_counter(counter: RotationCounter) -> None:
    tree_logger = logging.getLogger("avl_tree")
    tree_logger.removeHandler(counter)
    tree_logger.setLevel(logging.NOTSET)


def tree_layout(pre_order: List) -> Tuple[Dict, List[Tuple]]:
    """Rebuild node coordinates from a BST's pre-order listing.

    A binary search tree is fully determined by its pre-order sequence, so
    the shape can be recovered without touching the tree's nodes. x is the
    in-order rank, y is minus the depth.
    """
    positions: Dict = {}
    edges: List[Tuple] = []
    index = 0
    column = 0

    def place(low, high, depth, parent):
        nonlocal index, column
        if index >= len(pre_order):
            return
        value = pre_order[index]
        if low is not None and value < low:
            return
        if high is not None and not value < high:
            return
        index += 1
        if parent is not None:
            edges.append((parent, value))
        place(low, value, depth + 1, value)
        positions[value] = (column, -depth)
        column += 1
        place(value, high, depth + 1, value)

    place(None, None, 0, None)
    return positions, edges


def draw_tree(ax, tree: AVLTree, title: str, highlight=()) -> None:
    positions, edges = tree_layout(tree.pre_order())
    for parent, child in edges:
        (x0, y0), (x1, y1) = positions[parent], positions[child]
        ax.plot([x0, x1], [y0, y1], color=COLORS["dark"], linewidth=1.2, zorder=1)
    for value, (x, y) in positions.items():
        color = COLORS["orange"] if value in highlight else COLORS["blue"]
        ax.scatter([x], [y], s=700, color=color, edgecolor="white", zorder=2)
        ax.text(x, y, str(value), ha="center", va="center", fontsize=9,
                color="white", fontweight="bold", zorder=3)
    ax.set_title(title, fontsize=10, fontweight="bold")
    ax.set_xlim(-1, max(len(positions), 1))
    ax.set_ylim(-max(tree.height(), 1), 0.7)
    ax.axis("off")


def height_profile(sizes: List[int], shuffled: bool) -> np.ndarray:
    heights = []
    for n in sizes:
        values = np.random.permutation(n) if shuffled else np.arange(n)
        tree: AVLTree[int] = AVLTree()
        for v in values.tolist():
            tree.insert(v)
        assert tree.is_balanced()
        heights.append(tree.height())
    return np.array(heights)


# ---------------------------------------------------------------------------
# Example 1: Rotation Cases
# ---------------------------------------------------------------------------
def example_1_rotation_cases():
    """Show the four insert orders that trigger each kind of rotation."""
    print("=" * 60)
    print("Example 1: Rotation Cases")
    print("=" * 60)

    cases = [
        ("Left rotation (RR)", [10, 20, 30]),
        ("Right rotation (LL)", [30, 20, 10]),
        ("Left-right rotation (LR)", [30, 10, 20]),
        ("Right-left rotation (RL)", [10, 30, 20]),
    ]

    counter = attach_counter()
    fig, axes = plt.subplots(1, 4, figsize=(16, 4))
    try:
        for ax, (name, order) in zip(axes, cases):
            counter.reset()
            tree: AVLTree[int] = AVLTree()
            for v in order:
                tree.insert(v)
            print(f"\n  {name}: insert {order}")
            print(f"    pre_order: {tree.pre_order()}")
            print(f"    rotations: {counter.counts}")
            assert tree.pre_order() == [20, 10, 30]
            draw_tree(ax, tree, f"{name}\ninsert {order}", highlight=(20,))
    finally:
        detach_counter(counter)

    fig.suptitle("Every imbalanced three-node chain settles on the same shape",
                 fontsize=12, fontweight="bold")
    plt.tight_layout()
    fig.savefig(VIZ_DIR / "01_rotation_cases.png", dpi=150, bbox_inches="tight")
    plt.close(fig)
    print("\n  Saved: viz/01_rotation_cases.png")


# ---------------------------------------------------------------------------
# Example 2: Height Growth
# ---------------------------------------------------------------------------
def example_2_height_growth():
    """Compare tree height with the theoretical bounds."""
    print("\n" + "=" * 60)
    print("Example 2: Height Growth")
    print("=" * 60)

    sizes = np.array(HEIGHT_SIZES)
    sorted_heights = height_profile(HEIGHT_SIZES, shuffled=False)
    random_heights = height_profile(HEIGHT_SIZES, shuffled=True)
    lower = np.ceil(np.log2(sizes + 1))
    upper = 1.44 * np.log2(sizes + 2)

    print(f"\n  {'n':>6} {'sorted':>7} {'random':>7} {'lower':>6} {'upper':>6}")
    for n, hs, hr, lo, up in zip(sizes, sorted_heights, random_heights, lower, upper):
        print(f"  {n:>6} {hs:>7} {hr:>7} {lo:>6.0f} {up:>6.2f}")
        assert lo <= hs <= up and lo <= hr <= up

    fig, ax = plt.subplots(figsize=(9, 5.5))
    ax.plot(sizes, sorted_heights, "o-", color=COLORS["blue"], label="Sorted inserts")
    ax.plot(sizes, random_heights, "s-", color=COLORS["green"], label="Shuffled inserts")
    ax.plot(sizes, lower, "--", color=COLORS["dark"], label="ceil(log2(n+1))")
    ax.plot(sizes, upper, "--", color=COLORS["red"], label="1.44 log2(n+2)")
    ax.set_xscale("log", base=2)
    ax.set_xlabel("Number of elements n")
    ax.set_ylabel("Tree height")
    ax.set_title("AVL height stays within a constant factor of log2(n)",
                 fontsize=11, fontweight="bold")
    ax.legend(fontsize=9)
    ax.grid(True, alpha=0.3)
    fig.savefig(VIZ_DIR / "02_height_growth.png", dpi=150, bbox_inches="tight")
    plt.close(fig)
    print("\n  Saved: viz/02_height_growth.png")


# ---------------------------------------------------------------------------
# Example 3: Rotation Cost
# ---------------------------------------------------------------------------
def example_3_rotation_cost():
    """Count rotations per insert and per remove for several workloads."""
    print("\n" + "=" * 60)
    print("Example 3: Rotation Cost")
    print("=" * 60)

    workloads = {
        "Sorted": np.arange(ROTATION_N),
        "Reversed": np.arange(ROTATION_N)[::-1],
        "Shuffled": np.random.permutation(ROTATION_N),
    }

    insert_rates = []
    remove_rates = []
    counter = attach_counter()
    try:
        for name, values in workloads.items():
            tree: AVLTree[int] = AVLTree()
            counter.reset()
            for v in values.tolist():
                tree.insert(v)
            insert_rates.append(counter.total / ROTATION_N)

            counter.reset()
            for v in np.random.permutation(values).tolist():
                assert tree.remove(v)
            remove_rates.append(counter.total / ROTATION_N)
            assert tree.is_empty()

            print(f"\n  {name}: {insert_rates[-1]:.3f} rotations/insert, "
                  f"{remove_rates[-1]:.3f} rotations/remove")
    finally:
        detach_counter(counter)

    x = np.arange(len(workloads))
    fig, ax = plt.subplots(figsize=(9, 5.5))
    ax.bar(x - 0.18, insert_rates, 0.36, color=COLORS["blue"], label="Insert",
           edgecolor="white")
    ax.bar(x + 0.18, remove_rates, 0.36, color=COLORS["purple"], label="Remove",
           edgecolor="white")
    for i, (ri, rr) in enumerate(zip(insert_rates, remove_rates)):
        ax.text(i - 0.18, ri + 0.01, f"{ri:.2f}", ha="center", va="bottom", fontsize=9)
        ax.text(i + 0.18, rr + 0.01, f"{rr:.2f}", ha="center", va="bottom", fontsize=9)
    ax.set_xticks(x)
    ax.set_xticklabels(list(workloads))
    ax.set_ylabel("Single rotations per operation")
    ax.set_title(f"Rotation cost over {ROTATION_N} operations\n"
                 "Rebalancing work per operation is O(1) on average",
                 fontsize=11, fontweight="bold")
    ax.legend(fontsize=9)
    ax.grid(True, alpha=0.3, axis="y")
    fig.savefig(VIZ_DIR / "03_rotation_cost.png", dpi=150, bbox_inches="tight")
    plt.close(fig)
    print("\n  Saved: viz/03_rotation_cost.png")


# ---------------------------------------------------------------------------
# Example 4: Successor-Copy Removal
# ---------------------------------------------------------------------------
def example_4_successor_removal():
    """Remove a node with two children and show where the successor lands."""
    print("\n" + "=" * 60)
    print("Example 4: Successor-Copy Removal")
    print("=" * 60)

    values = [50, 30, 70, 20, 40, 60, 80]
    tree: AVLTree[int] = AVLTree()
    for v in values:
        tree.insert(v)

    fig, axes = plt.subplots(1, 2, figsize=(12, 4.5))
    draw_tree(axes[0], tree, "Before remove(30)", highlight=(30, 40))
    print(f"\n  Before: in_order={tree.in_order()} pre_order={tree.pre_order()}")

    assert tree.remove(30)
    assert tree.in_order() == [20, 40, 50, 60, 70, 80]
    assert tree.is_balanced()
    print(f"  After:  in_order={tree.in_order()} pre_order={tree.pre_order()}")

    draw_tree(axes[1], tree, "After remove(30)\n40 copied up from the right subtree",
              highlight=(40,))
    plt.tight_layout()
    fig.savefig(VIZ_DIR / "04_successor_removal.png", dpi=150, bbox_inches="tight")
    plt.close(fig)
    print("\n  Saved: viz/04_successor_removal.png")


# ---------------------------------------------------------------------------
# PDF Report
# ---------------------------------------------------------------------------
def generate_pdf_report():
    print("\n" + "=" * 60)
    print("Generating PDF report")
    print("=" * 60)

    report_path = Path(__file__).parent / "report.pdf"
    viz_files = sorted(VIZ_DIR.glob("*.png"))

    with PdfPages(str(report_path)) as pdf:
        fig = plt.figure(figsize=(11, 8.5))
        ax = fig.add_axes([0, 0, 1, 1])
        ax.axis("off")
        ax.text(0.5, 0.9, "AVL Tree", fontsize=26, ha="center", fontweight="bold",
                transform=ax.transAxes)
        summary_items = [
            "1. Rotation Cases: the four insert orders of a three-node chain",
            "   (RR, LL, LR, RL) all end with 20 at the root: pre_order [20, 10, 30].",
            "",
            "2. Height Growth: sorted and shuffled inserts both stay between",
            "   ceil(log2(n+1)) and 1.44 log2(n+2).",
            "",
            "3. Rotation Cost: each insert or remove performs a small constant",
            "   number of rotations on average.",
            "",
            "4. Successor-Copy Removal: removing a node with two children copies",
            "   the in-order successor's value up and deletes the successor below.",
        ]
        ax.text(0.06, 0.78, "\n".join(summary_items), fontsize=11, ha="left", va="top",
                transform=ax.transAxes, family="monospace", linespacing=1.4)
        pdf.savefig(fig)
        plt.close(fig)

        titles = {
            "01_rotation_cases.png": "Example 1: Rotation Cases",
            "02_height_growth.png": "Example 2: Height Growth",
            "03_rotation_cost.png": "Example 3: Rotation Cost",
            "04_successor_removal.png": "Example 4: Successor-Copy Removal",
        }

        for viz_file in viz_files:
            fig = plt.figure(figsize=(11, 8.5))
            title = titles.get(viz_file.name, viz_file.stem.replace("_", " ").title())
            fig.suptitle(title, fontsize=14, fontweight="bold", y=0.98)

            img = plt.imread(str(viz_file))
            ax = fig.add_axes([0.02, 0.02, 0.96, 0.92])
            ax.imshow(img)
            ax.axis("off")

            pdf.savefig(fig)
            plt.close(fig)

    print(f"  Report saved: report.pdf ({len(viz_files) + 1} pages)")


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------
def main():
    print("AVL Tree Demo")
    print("=" * 60)
    print(f"Seed: {SEED}")
    print()

    example_1_rotation_cases()
    example_2_height_growth()
    example_3_rotation_cost()
    example_4_successor_removal()
    generate_pdf_report()

    print("\n" + "=" * 60)
    print("All examples completed successfully.")
    print(f"Visualizations: {VIZ_DIR}/")
    print(f"Report: {Path(__file__).parent / 'report.pdf'}")
    print("=" * 60)


if __name__ == "__main__":
    main()
