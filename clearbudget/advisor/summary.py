from collections import defaultdict

from clearbudget.models.schemas import FinancialSummary, TransactionRecord
from clearbudget.utils.currency import format_inr_compact


def summarize(transactions: list[TransactionRecord]) -> FinancialSummary:
    total_income = sum(t.amount for t in transactions if t.type == "income")
    total_expenses = sum(t.amount for t in transactions if t.type == "expense")

    by_category: dict[str, float] = defaultdict(float)
    for t in transactions:
        if t.type == "expense":
            by_category[t.category] += t.amount

    return FinancialSummary(
        total_income=total_income,
        total_expenses=total_expenses,
        balance=total_income - total_expenses,
        category_totals=sorted(by_category.items(), key=lambda item: item[1], reverse=True),
        transaction_count=len(transactions),
    )


def top_categories_text(summary: FinancialSummary, limit: int = 3) -> str:
    """'food (₹1,200), rent (₹900)' for prompts and bot replies."""
    top = summary.category_totals[:limit]
    if not top:
        return "none yet"
    return ", ".join(f"{category} ({format_inr_compact(amount)})" for category, amount in top)
