import re
import uuid

from loguru import logger

from clearbudget.models.schemas import ParsePattern, TransactionRecord
from clearbudget.parsing.categories import resolve_category
from clearbudget.utils.currency import parse_inr

AMOUNT = r"([₹$]?[\d,]+(?:\.\d+)?)"
NUMBER_TOKEN = re.compile(r"\d[\d,]*(?:\.\d+)?")


def _p(pattern: str) -> re.Pattern:
    return re.compile(pattern.replace("<amount>", AMOUNT), re.IGNORECASE)


RULE_PATTERNS: list[ParsePattern] = [
    ParsePattern(_p(r"(?:spent|paid|bought|purchased?)\s+<amount>\s+(?:on|for|at)\s+(.+)"), "expense"),
    ParsePattern(_p(r"(?:bought|got)\s+(.+?)\s+(?:for|at|costs?)\s+<amount>"), "expense", amount_last=True),
    ParsePattern(_p(r"<amount>\s+(?:on|for)\s+(.+)"), "expense"),
    ParsePattern(_p(r"(?:received|earned|got|made)\s+<amount>\s+(?:from|as|for)\s+(.+)"), "income"),
    ParsePattern(
        _p(r"(?:salary|wage|income|freelance|job)\s+(?:of\s+)?<amount>"),
        "income",
        description="salary",
    ),
]

FALLBACK_PATTERNS: list[ParsePattern] = [
    ParsePattern(_p(r"spent\s+<amount>\s+(?:on|for)\s+(.+)"), "expense"),
    ParsePattern(_p(r"paid\s+<amount>\s+(?:for|on)\s+(.+)"), "expense"),
    ParsePattern(_p(r"bought\s+(.+?)\s+(?:for|at)\s+<amount>"), "expense", amount_last=True),
    ParsePattern(_p(r"purchased\s+(.+?)\s+(?:for|at)\s+<amount>"), "expense", amount_last=True),
    ParsePattern(_p(r"<amount>\s+(?:on|for|spent on)\s+(.+)"), "expense"),
    ParsePattern(_p(r"(.+?)\s+(?:cost|costs)\s+<amount>"), "expense", amount_last=True),
    ParsePattern(_p(r"(.+?)\s+<amount>\s*(?:rupees?|rs?\.?|₹)?$"), "expense", amount_last=True),
    ParsePattern(_p(r"received\s+<amount>\s+(?:as|from)\s+(.+)"), "income"),
    ParsePattern(_p(r"earned\s+<amount>\s+(?:from|as)\s+(.+)"), "income"),
    ParsePattern(_p(r"got\s+<amount>\s+(?:from|as)\s+(.+)"), "income"),
    ParsePattern(_p(r"made\s+<amount>\s+(?:from|through)\s+(.+)"), "income"),
    ParsePattern(_p(r"(salary|income|wage)\s+(?:of\s+)?<amount>"), "income", amount_last=True),
    ParsePattern(_p(r"<amount>\s+(?:salary|income|received)"), "income", description="income"),
]


def parse_amount(raw: str) -> float | None:
    """Strip currency symbols and separators; only positive amounts count."""
    value = parse_inr(raw)
    if value is None or value <= 0:
        return None
    return value


def first_number(text: str) -> float | None:
    """First numeric token anywhere in ``text``, if it is a positive amount."""
    match = NUMBER_TOKEN.search(text)
    if not match:
        return None
    return parse_amount(match.group(0))


def new_record_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


def match_patterns(
    message: str,
    patterns: list[ParsePattern],
    id_prefix: str,
    default_description: str | None = None,
    income_category: str | None = None,
) -> TransactionRecord | None:
    """Evaluate ``patterns`` in order against ``message``.

    The first pattern that matches with a valid amount produces the record;
    a match whose amount does not parse moves on to the next pattern.
    ``income_category`` pins the category of income records instead of
    resolving it from the description.
    """
    text = message.lower().strip()
    for pattern in patterns:
        match = pattern.regex.search(text)
        if not match:
            continue

        if pattern.amount_last:
            raw_description, raw_amount = match.group(1), match.group(2)
        else:
            raw_amount = match.group(1)
            raw_description = match.group(2) if pattern.regex.groups > 1 else None

        amount = parse_amount(raw_amount)
        if amount is None:
            logger.debug("Pattern {} matched without a usable amount", pattern.regex.pattern)
            continue

        description = (
            pattern.description
            or (raw_description or "").strip()
            or default_description
            or pattern.type
        )
        if pattern.type == "income" and income_category:
            category = income_category
        else:
            category = resolve_category(description, pattern.type)
        return TransactionRecord(
            id=new_record_id(id_prefix),
            type=pattern.type,
            amount=amount,
            category=category,
            description=description,
        )
    return None
