import re

from loguru import logger

from clearbudget.advisor.advisor import FinancialAdvisor
from clearbudget.llm.errors import AmountNotFound
from clearbudget.models.schemas import (
    AdviceAction,
    ConversationTurn,
    ParseFailedAction,
    RecordTransactionAction,
    RouterAction,
    TransactionRecord,
    ViewChangeAction,
)
from clearbudget.parsing.extractor import TransactionExtractor
from clearbudget.utils.currency import format_inr_compact

VIEW_COMMANDS = [
    ("show summary", "summary", "Here's your financial summary!"),
    ("show chart", "chart", "Here's a breakdown of your spending by category."),
    ("show tips", "tips", "Here are some personalized financial tips for you!"),
]

RETRY_EXAMPLES = [
    "💰 'Spent 250 on lunch'",
    "📱 'Received 5000 from salary'",
    "🛒 'Bought groceries for 800'",
    "💻 'Got 2000 from freelance work'",
]

TRANSACTION_AMOUNT = re.compile(r"(spent|paid|bought|received|earned|got|made)\s+[₹$]?\d", re.IGNORECASE)


class IntentRouter:
    """Decide what a chat message is and produce the matching action."""

    def __init__(self, extractor: TransactionExtractor, advisor: FinancialAdvisor, product_name: str = "ClearBudget"):
        self.extractor = extractor
        self.advisor = advisor
        self.advice_pattern = re.compile(
            r"(\?|how|what|should|can|advice|tip|help|budget|save|invest|emergency|app|"
            + re.escape(product_name)
            + ")",
            re.IGNORECASE,
        )

    def is_advice_question(self, message: str) -> bool:
        return bool(self.advice_pattern.search(message)) and not TRANSACTION_AMOUNT.search(message)

    async def route(
        self,
        message: str,
        history: list[ConversationTurn],
        transactions: list[TransactionRecord],
    ) -> RouterAction:
        lowered = message.lower()
        for command, view, reply in VIEW_COMMANDS:
            if command in lowered:
                return ViewChangeAction(view=view, reply=reply)

        if self.is_advice_question(message):
            reply = await self.advisor.generate_advice(message, transactions, history)
            return AdviceAction(reply=reply)

        try:
            record = await self.extractor.extract(message)
        except AmountNotFound as e:
            logger.info("Could not parse {!r}: {}", message, e)
            return ParseFailedAction(
                reply=(
                    f"I'm having trouble understanding that message. {e}\n\n"
                    "Please try phrases like:\n\n" + "\n".join(RETRY_EXAMPLES)
                ),
                examples=RETRY_EXAMPLES,
            )

        return RecordTransactionAction(transaction=record, reply=confirmation_message(record))


def confirmation_message(record: TransactionRecord) -> str:
    amount = format_inr_compact(record.amount)
    if record.type == "income":
        return f"Great! I've recorded {amount} as income from {record.description}."
    return f"Got it! I've recorded {amount} spent on {record.category}."
