import math
import re

_CURRENCY_CHARS = re.compile(r"[₹$€£,\s]")


def _group_indian(digits: str) -> str:
    """Group an integer string the Indian way: 12,34,567."""
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups) + "," + tail


def format_inr(amount: float, show_symbol: bool = True) -> str:
    """Format amount as rupees with two decimals: ₹1,25,000.50."""
    sign = "-" if amount < 0 else ""
    whole, _, fraction = f"{abs(amount):.2f}".partition(".")
    formatted = f"{sign}{_group_indian(whole)}.{fraction}"
    return f"₹{formatted}" if show_symbol else formatted


def format_inr_compact(amount: float, show_symbol: bool = True) -> str:
    """Like format_inr but drops the decimals for whole amounts."""
    rounded = round(amount, 2)
    if rounded == int(rounded):
        sign = "-" if rounded < 0 else ""
        formatted = f"{sign}{_group_indian(str(abs(int(rounded))))}"
        return f"₹{formatted}" if show_symbol else formatted
    return format_inr(amount, show_symbol)


def format_inr_with_units(amount: float, show_symbol: bool = True) -> str:
    symbol = "₹" if show_symbol else ""
    if amount >= 10_000_000:
        return f"{symbol}{amount / 10_000_000:.2f} Cr"
    if amount >= 100_000:
        return f"{symbol}{amount / 100_000:.2f} L"
    if amount >= 1000:
        return f"{symbol}{amount / 1000:.1f}K"
    return format_inr(amount, show_symbol)


def parse_inr(text: str) -> float | None:
    """Parse '₹1,25,000.50' style strings. Returns None when not a finite number."""
    cleaned = _CURRENCY_CHARS.sub("", text)
    try:
        value = float(cleaned)
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value
