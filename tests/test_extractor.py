import asyncio
import json

import pytest

from clearbudget.llm.errors import AmountNotFound, AuthenticationFailed, RemoteCallFailed, UnparseableResponse
from clearbudget.parsing.extractor import TransactionExtractor, extract_json_object


def _extract(client, message):
    return asyncio.run(TransactionExtractor(client).extract(message))


def _reply(**fields) -> str:
    return json.dumps(fields)


def test_rule_match_never_calls_the_model(fake_client):
    client = fake_client(responses=[_reply(type="income", amount=1, category="food", description="x")])
    record = _extract(client, "spent 250 on lunch")

    assert (record.type, record.amount, record.category, record.description) == ("expense", 250, "food", "lunch")
    assert client.prompts == []


def test_model_output_is_used_when_rules_miss(fake_client):
    client = fake_client(
        responses=[
            "```json\n"
            + _reply(type="expense", amount=649, category="Entertainment", description="netflix subscription")
            + "\n```"
        ]
    )
    record = _extract(client, "my netflix subscription renewed, 649")

    assert record.id.startswith("ai-")
    assert (record.type, record.amount, record.category, record.description) == (
        "expense",
        649,
        "entertainment",
        "netflix subscription",
    )
    assert len(client.prompts) == 1
    assert "my netflix subscription renewed, 649" in client.prompts[0]


def test_model_json_wrapped_in_prose(fake_client):
    client = fake_client(
        responses=['Sure! Here it is: {"type": "income", "amount": 800, "description": "tutoring"} Hope that helps.']
    )
    record = _extract(client, "tutoring paid me 800 this week")

    assert (record.type, record.amount, record.category, record.description) == ("income", 800, "salary", "tutoring")


def test_missing_type_inferred_from_message_and_string_amount(fake_client):
    client = fake_client(responses=[_reply(amount="1,200", description="electrician")])
    record = _extract(client, "paid the electrician 1200 yesterday")

    assert (record.type, record.amount, record.category) == ("expense", 1200, "others")


def test_income_type_inferred_from_keywords(fake_client):
    client = fake_client(responses=[_reply(type="refund", amount=300)])
    record = _extract(client, "earned some money, 300 total")

    assert record.type == "income"
    assert record.description == "earned some money, 300 total"


def test_ambiguous_type_defaults_to_expense(fake_client):
    client = fake_client(responses=[_reply(amount=120, description="tea")])
    record = _extract(client, "tea with friends 120 yesterday")

    assert record.type == "expense"


def test_missing_amount_recovered_from_message(fake_client):
    client = fake_client(responses=[_reply(type="expense", amount=None, category="food", description="pizza")])
    record = _extract(client, "pizza night, 450 split nowhere")

    assert (record.amount, record.category, record.description) == (450, "food", "pizza")


def test_amount_too_large_for_float_recovered_from_message(fake_client):
    client = fake_client(responses=['{"type": "expense", "amount": 1' + "0" * 400 + "}"])
    record = _extract(client, "tea with friends 120 yesterday")

    assert (record.type, record.amount) == ("expense", 120)


def test_unexpected_model_stage_error_falls_back(fake_client, monkeypatch):
    def explode(data, message):
        raise TypeError("unexpected field shape")

    monkeypatch.setattr("clearbudget.parsing.extractor.record_from_model_output", explode)
    record = _extract(fake_client(responses=[_reply(type="expense", amount=300)]), "dinner 300")

    assert record.id.startswith("fallback-")
    assert record.category == "food"


def test_freelance_income_from_fallback_is_salary(offline_client):
    record = _extract(offline_client, "made 3000 through freelance gig")

    assert record.id.startswith("fallback-")
    assert (record.type, record.category) == ("income", "salary")


def test_unknown_category_is_resolved_from_description(fake_client):
    client = fake_client(responses=[_reply(type="expense", amount=900, category="groceries", description="weekly groceries")])
    record = _extract(client, "weekly groceries came to 900 today")

    assert record.category == "others"


def test_blank_description_defaults_to_message(fake_client):
    client = fake_client(responses=[_reply(type="expense", amount=60, category="", description="  ")])
    record = _extract(client, "bus fare was 60 today")

    assert record.description == "bus fare was 60 today"
    assert record.category == "transport"


@pytest.mark.parametrize(
    "client_kwargs",
    [
        {"has_credential": False},
        {"error": RemoteCallFailed("HTTP error! status: 500", status_code=500)},
        {"error": AuthenticationFailed("Invalid key", status_code=401)},
        {"responses": ["I cannot help with that."]},
        {"responses": ["{not json at all}"]},
        {"responses": ["[1, 2, 3]"]},
        {"error": RuntimeError("connection reset")},
    ],
)
def test_model_failures_fall_back_to_heuristics(fake_client, client_kwargs):
    record = _extract(fake_client(**client_kwargs), "dinner 300")

    assert record.id.startswith("fallback-")
    assert (record.type, record.amount, record.category, record.description) == ("expense", 300, "food", "dinner")


def test_bare_number_succeeds_only_at_fallback(offline_client):
    record = _extract(offline_client, "250")

    assert record.id.startswith("fallback-")
    assert (record.type, record.amount, record.description) == ("expense", 250, "250")


def test_no_number_anywhere_is_terminal(fake_client):
    client = fake_client(responses=[_reply(type="expense", description="a great day")])
    with pytest.raises(AmountNotFound, match="include an amount"):
        _extract(client, "had a great day")
    assert len(client.prompts) == 1


def test_no_number_without_credential(offline_client):
    with pytest.raises(AmountNotFound):
        _extract(offline_client, "had a great day")


def test_extract_json_object_takes_widest_span():
    assert extract_json_object('x {"a": {"b": 1}} y') == {"a": {"b": 1}}


def test_extract_json_object_without_braces():
    with pytest.raises(UnparseableResponse):
        extract_json_object("no json here")
