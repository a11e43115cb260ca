import re
from dataclasses import dataclass
from datetime import datetime
from typing import Annotated, Literal, Union, get_args

from pydantic import BaseModel, ConfigDict, Field

TransactionType = Literal["income", "expense"]
Category = Literal[
    "food",
    "rent",
    "transport",
    "entertainment",
    "shopping",
    "salary",
    "freelance",
    "others",
]
CATEGORIES: tuple[str, ...] = get_args(Category)


class TransactionRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    type: TransactionType
    amount: float = Field(gt=0)
    category: Category
    description: str = Field(min_length=1)
    created_at: datetime = Field(default_factory=datetime.now)


@dataclass(frozen=True)
class ParsePattern:
    """One phrasing the extractors recognise.

    ``amount_last`` marks patterns whose first group is the description and
    second group the amount. ``description`` replaces whatever the pattern
    captured as the description.
    """

    regex: re.Pattern
    type: TransactionType
    amount_last: bool = False
    description: str | None = None


class ConversationTurn(BaseModel):
    sender: Literal["user", "bot"]
    text: str


class ViewChangeAction(BaseModel):
    action: Literal["view_change"] = "view_change"
    view: Literal["summary", "chart", "tips"]
    reply: str


class AdviceAction(BaseModel):
    action: Literal["advice"] = "advice"
    reply: str


class RecordTransactionAction(BaseModel):
    action: Literal["record_transaction"] = "record_transaction"
    transaction: TransactionRecord
    reply: str


class ParseFailedAction(BaseModel):
    action: Literal["parse_failed"] = "parse_failed"
    reply: str
    examples: list[str] = []


RouterAction = Annotated[
    Union[ViewChangeAction, AdviceAction, RecordTransactionAction, ParseFailedAction],
    Field(discriminator="action"),
]


class FinancialSummary(BaseModel):
    total_income: float = 0.0
    total_expenses: float = 0.0
    balance: float = 0.0
    # (category, total) pairs, largest first
    category_totals: list[tuple[str, float]] = []
    transaction_count: int = 0


class ChatRequest(BaseModel):
    message: str
    history: list[ConversationTurn] = []
    owner: str = "default"


class ChatResponse(BaseModel):
    result: RouterAction


class ParseRequest(BaseModel):
    message: str


class CreateTransactionRequest(BaseModel):
    type: TransactionType
    amount: float = Field(gt=0)
    category: Category | None = None
    description: str | None = None
    owner: str = "default"


class UpdateTransactionRequest(BaseModel):
    type: TransactionType | None = None
    amount: float | None = Field(default=None, gt=0)
    category: Category | None = None
    description: str | None = None
