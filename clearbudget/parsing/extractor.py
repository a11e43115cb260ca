"""Turn a chat message into a TransactionRecord.

Three stages run in order until one produces a record: the rule-based
patterns, the remote model, and the fallback heuristics. The fallback is the
only stage whose failure reaches the caller, as ``AmountNotFound``.
"""

import json
import math
import re

from loguru import logger

from clearbudget.llm.client import ModelClient
from clearbudget.llm.errors import (
    AmountNotFound,
    ExtractionError,
    NoCredential,
    RemoteCallFailed,
    UnparseableResponse,
)
from clearbudget.llm.prompts import EXTRACTION_PROMPT
from clearbudget.models.schemas import CATEGORIES, TransactionRecord
from clearbudget.parsing.categories import guess_category, resolve_category
from clearbudget.parsing.patterns import (
    FALLBACK_PATTERNS,
    RULE_PATTERNS,
    first_number,
    match_patterns,
    new_record_id,
    parse_amount,
)

PARSE_GUIDANCE = (
    "Could not parse the finance message. "
    "Please include an amount and describe the transaction clearly."
)

CODE_FENCE = re.compile(r"```(?:json)?\n?")
JSON_SPAN = re.compile(r"\{.*\}", re.DOTALL)
EXPENSE_HINTS = re.compile(r"spent|paid|bought|purchased|cost", re.IGNORECASE)
INCOME_HINTS = re.compile(r"received|earned|got|made|income|salary", re.IGNORECASE)
INCOME_KEYWORDS = re.compile(r"salary|income|earned|received|got|made", re.IGNORECASE)


def try_rule_based_parsing(message: str) -> TransactionRecord | None:
    return match_patterns(message, RULE_PATTERNS, "rule", default_description="transaction")


def fallback_parse(message: str) -> TransactionRecord:
    record = match_patterns(message, FALLBACK_PATTERNS, "fallback", income_category="salary")
    if record is not None:
        return record

    # Last resort: any number at all, typed by keywords.
    amount = first_number(message)
    if amount is None:
        raise AmountNotFound(PARSE_GUIDANCE)

    tx_type = "income" if INCOME_KEYWORDS.search(message) else "expense"
    return TransactionRecord(
        id=new_record_id("fallback"),
        type=tx_type,
        amount=amount,
        category="salary" if tx_type == "income" else guess_category(message),
        description=message.strip() or tx_type,
    )


def extract_json_object(text: str) -> dict:
    """Pull the widest ``{...}`` span out of model text and decode it."""
    cleaned = CODE_FENCE.sub("", text).strip()
    match = JSON_SPAN.search(cleaned)
    if not match:
        raise UnparseableResponse("No valid JSON found in AI response")
    try:
        data = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise UnparseableResponse(f"AI response is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise UnparseableResponse("AI response JSON is not an object")
    return data


def _coerce_amount(value) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            amount = float(value)
        except OverflowError:
            return None
        return amount if math.isfinite(amount) and amount > 0 else None
    if isinstance(value, str):
        return parse_amount(value)
    return None


def _text_field(data: dict, key: str) -> str | None:
    value = data.get(key)
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def record_from_model_output(data: dict, message: str) -> TransactionRecord:
    """Validate model output field by field, repairing from the message."""
    tx_type = data.get("type")
    if tx_type not in ("income", "expense"):
        if EXPENSE_HINTS.search(message):
            tx_type = "expense"
        elif INCOME_HINTS.search(message):
            tx_type = "income"
        else:
            tx_type = "expense"

    amount = _coerce_amount(data.get("amount"))
    if amount is None:
        amount = first_number(message)
    if amount is None:
        raise AmountNotFound("Could not extract valid amount from message")

    description = _text_field(data, "description") or message.strip() or tx_type

    category = (_text_field(data, "category") or "").lower()
    if category not in CATEGORIES:
        category = resolve_category(description, tx_type)

    return TransactionRecord(
        id=new_record_id("ai"),
        type=tx_type,
        amount=amount,
        category=category,
        description=description,
    )


class TransactionExtractor:
    def __init__(self, client: ModelClient):
        self.client = client
        self.stages = [self._rule_stage, self._model_stage, self._fallback_stage]

    async def extract(self, message: str) -> TransactionRecord:
        last_error: ExtractionError | None = None
        for stage in self.stages:
            try:
                record = await stage(message)
            except NoCredential as e:
                logger.debug("{}", e)
                last_error = e
                continue
            except ExtractionError as e:
                logger.warning("{} failed for {!r}: {}", stage.__name__, message, e)
                last_error = e
                continue
            if record is not None:
                logger.info("Parsed {!r} via {} -> {} {}", message, stage.__name__, record.type, record.amount)
                return record
        raise last_error or AmountNotFound(PARSE_GUIDANCE)

    async def _rule_stage(self, message: str) -> TransactionRecord | None:
        return try_rule_based_parsing(message)

    async def _model_stage(self, message: str) -> TransactionRecord:
        prompt = EXTRACTION_PROMPT.format(categories=", ".join(CATEGORIES), message=message)
        try:
            text = await self.client.query(prompt)
        except ExtractionError:
            raise
        except Exception as e:
            raise RemoteCallFailed(f"Model query failed: {e}") from e
        try:
            return record_from_model_output(extract_json_object(text), message)
        except ExtractionError:
            raise
        except Exception as e:
            raise UnparseableResponse(f"AI response could not be turned into a transaction: {e}") from e

    async def _fallback_stage(self, message: str) -> TransactionRecord:
        return fallback_parse(message)
