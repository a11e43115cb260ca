from types import SimpleNamespace

from clearbudget.bot.handler import MAX_HISTORY_MESSAGES, _append_to_history, _summary_text
from clearbudget.models.schemas import TransactionRecord


def test_history_is_trimmed_to_recent_turns():
    context = SimpleNamespace(user_data={})
    for i in range(MAX_HISTORY_MESSAGES + 3):
        _append_to_history(context, "user", f"message {i}")

    history = context.user_data["history"]
    assert len(history) == MAX_HISTORY_MESSAGES
    assert history[-1] == {"sender": "user", "text": f"message {MAX_HISTORY_MESSAGES + 2}"}


def test_summary_text_lists_totals_and_categories():
    transactions = [
        TransactionRecord(id="1", type="income", amount=150000, category="salary", description="salary"),
        TransactionRecord(id="2", type="expense", amount=2500, category="food", description="dinner"),
    ]
    text = _summary_text(transactions)

    assert "Income: ₹1,50,000.00" in text
    assert "*Balance: ₹1,47,500.00*" in text
    assert "1. food — ₹2.5K" in text


def test_summary_text_without_transactions():
    assert "No transactions yet" in _summary_text([])
