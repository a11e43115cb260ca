from clearbudget.models.schemas import TransactionType

# Checked in order, first hit wins.
CATEGORY_KEYWORDS: list[tuple[str, tuple[str, ...]]] = [
    ("food", ("food", "lunch", "dinner")),
    ("rent", ("rent", "housing")),
    ("transport", ("bus", "train", "uber")),
    ("entertainment", ("movie", "game", "concert")),
    ("shopping", ("clothes", "shopping")),
]


def guess_category(text: str) -> str:
    lowered = text.lower()
    for category, keywords in CATEGORY_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return category
    return "others"


def resolve_category(text: str, tx_type: TransactionType) -> str:
    """Category for a freshly extracted record.

    Income never lands in the expense vocabulary: it is ``freelance`` when the
    text says so and ``salary`` otherwise.
    """
    if tx_type == "income":
        return "freelance" if "freelance" in text.lower() else "salary"
    return guess_category(text)
