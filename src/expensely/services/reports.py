"""Chart rendering for the analysis views."""

from __future__ import annotations

import io
from datetime import date
from typing import Sequence

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
from matplotlib.figure import Figure  # noqa: E402

from .analytics import ExpenseLike, category_totals, format_currency, weekly_expenses  # noqa: E402

# Same palette the dashboard legend uses.
COLORS = ["#0088FE", "#00C49F", "#FFBB28", "#FF8042", "#8884d8", "#82ca9d"]


def build_category_chart(expenses: Sequence[ExpenseLike], *, currency_symbol: str = "₹") -> Figure:
    """Create a donut chart of spend per category with the total in the centre."""

    totals = category_totals(expenses)
    labels = [str(item["category"]) for item in totals]
    sizes = [float(item["amount"]) for item in totals]
    grand_total = sum(sizes)

    fig, ax = plt.subplots(figsize=(8, 6))

    if sizes and grand_total > 0:
        colors = [COLORS[i % len(COLORS)] for i in range(len(sizes))]
        wedges, _texts, autotexts = ax.pie(
            sizes,
            labels=None,
            autopct=lambda pct: f"{pct:.1f}%" if pct > 4 else "",
            wedgeprops=dict(width=0.45, edgecolor="white", linewidth=1.5),
            startangle=90,
            colors=colors,
            pctdistance=0.78,
        )
        for autotext in autotexts:
            autotext.set_fontsize(9)
            autotext.set_fontweight("bold")
            autotext.set_color("white")

        ax.text(0, 0.08, "Total Spending", ha="center", va="center", fontsize=11, color="#666")
        ax.text(
            0,
            -0.08,
            format_currency(grand_total, currency_symbol),
            ha="center",
            va="center",
            fontsize=16,
            fontweight="bold",
            color="#1F2937",
        )

        legend_labels = [
            f"{label}: {format_currency(size, currency_symbol)} ({size / grand_total * 100:.1f}%)"
            for label, size in zip(labels, sizes)
        ]
        ax.legend(
            wedges,
            legend_labels,
            title="Categories",
            loc="center left",
            bbox_to_anchor=(1.02, 0.5),
            fontsize=9,
        )
        ax.axis("equal")
        ax.set_title("Spending by Category", fontsize=14, fontweight="bold", pad=16)
    else:
        ax.text(0.5, 0.5, "No expense data", ha="center", va="center", fontsize=14, color="#666")
        ax.axis("off")

    fig.tight_layout()
    return fig


def build_weekly_chart(expenses: Sequence[ExpenseLike], *, today: date) -> Figure:
    """Create a bar chart of daily spend across the trailing week."""

    weekly = weekly_expenses(expenses, today=today)
    labels = [date.fromisoformat(str(day["date"])).strftime("%a %d") for day in weekly]
    amounts = [float(day["amount"]) for day in weekly]

    fig, ax = plt.subplots(figsize=(8, 4))
    ax.bar(labels, amounts, color=COLORS[0])
    ax.set_title("Last 7 Days", fontsize=14, fontweight="bold")
    ax.set_ylabel("Amount")
    ax.grid(axis="y", alpha=0.3)
    fig.tight_layout()
    return fig


def render_png(fig: Figure) -> bytes:
    """Serialize ``fig`` to PNG bytes and release it."""

    buffer = io.BytesIO()
    try:
        fig.savefig(buffer, format="png", bbox_inches="tight", dpi=120)
    finally:
        plt.close(fig)
    return buffer.getvalue()
