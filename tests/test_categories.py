import pytest

from clearbudget.parsing.categories import guess_category, resolve_category


@pytest.mark.parametrize(
    "text, expected",
    [
        ("lunch with team", "food"),
        ("Dinner at home", "food"),
        ("monthly RENT", "rent"),
        ("housing society fee", "rent"),
        ("uber to office", "transport"),
        ("train ticket", "transport"),
        ("movie night", "entertainment"),
        ("concert pass", "entertainment"),
        ("new clothes", "shopping"),
        ("coffee", "others"),
        ("", "others"),
    ],
)
def test_guess_category_keyword_table(text, expected):
    assert guess_category(text) == expected


def test_earlier_group_wins_when_two_match():
    # "dinner" (food) is checked before "movie" (entertainment)
    assert guess_category("movie and dinner") == "food"
    assert guess_category("rent for the bus depot") == "rent"


def test_guess_category_is_pure():
    text = "Uber ride home after the game"
    assert guess_category(text) == guess_category(text) == "transport"


def test_substring_matching():
    # "bus" inside "business" still counts
    assert guess_category("business cards") == "transport"


def test_resolve_category_income_defaults():
    assert resolve_category("salary", "income") == "salary"
    assert resolve_category("dad", "income") == "salary"
    assert resolve_category("Freelance design work", "income") == "freelance"


def test_resolve_category_expense_uses_keywords():
    assert resolve_category("lunch", "expense") == "food"
    assert resolve_category("freelance tools", "expense") == "others"
