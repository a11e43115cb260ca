import random
import re

from loguru import logger

from clearbudget.advisor.summary import summarize, top_categories_text
from clearbudget.llm.client import ModelClient
from clearbudget.llm.errors import ExtractionError
from clearbudget.llm.prompts import ADVICE_PROMPT, TIPS_PROMPT
from clearbudget.models.schemas import ConversationTurn, FinancialSummary, TransactionRecord
from clearbudget.utils.currency import format_inr_compact as inr

MAX_HISTORY_TURNS = 10
RECENT_TRANSACTIONS = 15
MAX_TIPS = 5
MIN_TIPS = 4

WRAPPING_QUOTES = re.compile(r"^[\"']|[\"']$")
LEADING_BULLETS = re.compile(r"^[\d\-\*\.\)\s]+")
STARTS_WITH_EMOJI = re.compile(
    "^[\U0001F300-\U0001F5FF\U0001F600-\U0001F64F\U0001F680-\U0001F6FF"
    "\U0001F700-\U0001F8FF\U0001F900-\U0001F9FF☀-➿]"
)

GENERAL_TIPS = [
    "🎯 Pro tip: The 50/30/20 rule works wonders - 50% needs, 30% wants, 20% savings. Start small and build up!",
    "📱 {product}'s chat makes tracking super easy! Just tell me 'spent 200 on groceries' and I'll handle the categorization.",
    "🎓 Always look for student discounts! Apps like HDFC Smartbuy, Amazon Prime Student can save you 10-40% on purchases.",
    "📦 Try the 'envelope method' - set monthly limits for categories and stick to them. {product} helps you track this automatically!",
    "💰 Emergency fund tip: Save ₹100-500 weekly in a separate account. Small amounts compound into big security!",
]

ONBOARDING_TIPS = [
    "Hey buddy! 👋 Start tracking your expenses here in {product} to unlock personalized financial insights!",
    "💡 Pro tip: Once you log some transactions, I'll analyze your spending patterns and give you smart money advice!",
    "🎯 {product} makes it super easy - just chat with me like 'spent 250 on lunch' and I'll handle the rest!",
]

# (category, share of expenses above which the tip fires, tip template)
CATEGORY_TIPS = {
    "food": (30, "🍴 I see you're spending {amount} on food ({percent:.0f}% of expenses). Try cooking at home more often - you could save ₹5000+ monthly!"),
    "transport": (20, "🚌 Transport is eating up {amount} of your budget! Consider monthly passes or carpooling to reduce costs."),
    "entertainment": (25, "🎬 You're spending {amount} on entertainment. Balance is key! Try free activities or student discounts to enjoy while saving."),
    "shopping": (20, "🛍️ Shopping costs are at {amount}. Before buying, ask yourself: Do I need this or want this? Wait 24 hours before non-essential purchases!"),
}


class FinancialAdvisor:
    def __init__(self, client: ModelClient, product_name: str = "ClearBudget", rng: random.Random | None = None):
        self.client = client
        self.product = product_name
        self.rng = rng or random.Random()

    async def generate_advice(
        self,
        message: str,
        transactions: list[TransactionRecord],
        history: list[ConversationTurn] | None = None,
    ) -> str:
        summary = summarize(transactions)

        if self.client.has_credential:
            prompt = ADVICE_PROMPT.format(
                product=self.product,
                message=message,
                total_income=inr(summary.total_income),
                total_expenses=inr(summary.total_expenses),
                balance=inr(summary.balance),
                top_categories=top_categories_text(summary),
                transaction_count=summary.transaction_count,
                history=_history_block(history),
            )
            try:
                response = await self.client.query(prompt)
                advice = WRAPPING_QUOTES.sub("", response.strip()).strip()
                if advice:
                    return advice
            except ExtractionError as e:
                logger.warning("AI advice generation failed, using rule-based response: {}", e)

        return self.rule_based_advice(message, summary)

    def rule_based_advice(self, message: str, summary: FinancialSummary) -> str:
        lowered = message.lower()
        income, expenses, balance = summary.total_income, summary.total_expenses, summary.balance

        if "budget" in lowered or "how much should i spend" in lowered:
            if balance > 0:
                return (
                    f"Hey! Based on your {inr(income)} income and current spending, you're doing okay! "
                    f"Try the 50/30/20 rule: {inr(income * 0.5)} for needs, {inr(income * 0.3)} for wants, "
                    f"and {inr(income * 0.2)} for savings."
                )
            return (
                f"Your current expenses are {inr(expenses)} vs income of {inr(income)}. "
                f"Let's work on reducing expenses by {inr(abs(balance))} to get back on track!"
            )

        if "save" in lowered or "saving" in lowered:
            if balance > income * 0.2:
                return (
                    f"🎉 You're already saving well with {inr(balance)} leftover! Consider investing in SIPs "
                    "or FDs for better growth. Even ₹1000/month in SIP can grow to lakhs over time!"
                )
            if balance > 0:
                return (
                    f"You have {inr(balance)} left after expenses. Try to increase this to at least 20% of "
                    f"income ({inr(income * 0.2)}). Start by reducing your top expense category!"
                )
            return (
                f"First, let's balance your spending! You're {inr(abs(balance))} in the red. "
                f"Use {self.product}'s charts to see where most money goes and cut back there."
            )

        if "invest" in lowered:
            return (
                "💡 Great question! For beginners, start with SIPs in diversified mutual funds. Once you have "
                "6-month emergency fund, consider: 1) ELSS for tax saving 2) Index funds for steady growth "
                "3) FD for safe returns. Start small with ₹500-1000 monthly!"
            )

        if "app" in lowered or self.product.lower() in lowered or "how to use" in lowered:
            return (
                f"🚀 {self.product} makes money tracking super easy! Just chat with me like: 'spent 250 on lunch', "
                "'got 5000 salary', 'bought coffee for 50'. I'll automatically categorize everything! "
                "Check the Analytics tab for spending charts and Smart Tips for personalized advice."
            )

        if "emergency" in lowered:
            return (
                f"💪 Emergency funds are crucial! Aim for 6 months of expenses = {inr(expenses * 6)}. "
                "Seems big? Start with ₹500-1000 monthly in a separate savings account. "
                f"Use {self.product} to track this as 'emergency fund' income!"
            )

        return (
            "🤔 I'm here to help with all your money questions! You can ask me about budgeting, saving, "
            f"investing, or how to use {self.product} better. Your current balance is {inr(balance)} - "
            "want specific advice about improving it?"
        )

    async def generate_tips(self, transactions: list[TransactionRecord]) -> list[str]:
        if not transactions:
            return [tip.format(product=self.product) for tip in ONBOARDING_TIPS]

        summary = summarize(transactions)

        if self.client.has_credential:
            recent = "\n".join(
                f"{t.type} {inr(t.amount)} on {t.category} - {t.description}"
                for t in transactions[-RECENT_TRANSACTIONS:]
            )
            prompt = TIPS_PROMPT.format(
                product=self.product,
                total_income=inr(summary.total_income),
                total_expenses=inr(summary.total_expenses),
                balance=inr(summary.balance),
                top_categories=top_categories_text(summary),
                recent_transactions=recent,
            )
            try:
                tips = clean_tips(await self.client.query(prompt))
                if tips:
                    return tips
            except ExtractionError as e:
                logger.warning("AI tips generation failed, using rule-based tips: {}", e)

        return self.rule_based_tips(transactions, summary)

    def rule_based_tips(self, transactions: list[TransactionRecord], summary: FinancialSummary) -> list[str]:
        tips: list[str] = []
        income, expenses, balance = summary.total_income, summary.total_expenses, summary.balance

        if len(transactions) < 5:
            tips.append(
                f"👋 Hey there! Great start tracking your money in {self.product}! "
                "Keep logging transactions to get more personalized insights."
            )

        if balance < 0:
            tips.append(
                "🚨 Buddy, you're spending more than you're earning! "
                "Let's work together to create a budget and find areas to cut back."
            )
        elif 0 < balance < income * 0.1:
            tips.append(
                "🔥 You're living paycheck to paycheck! Try to save at least 10-20% of your income. "
                "Even ₹500/month is a great start!"
            )
        elif balance > income * 0.3:
            tips.append(
                "🎆 Awesome! You're saving well! Consider investing some of that surplus "
                "in SIPs or fixed deposits for better returns."
            )

        if summary.category_totals:
            top_category, top_amount = summary.category_totals[0]
            percent = top_amount / expenses * 100
            if top_category in CATEGORY_TIPS:
                threshold, template = CATEGORY_TIPS[top_category]
                if percent > threshold:
                    tips.append(template.format(amount=inr(round(top_amount)), percent=percent))

        food_count = sum(1 for t in transactions if t.type == "expense" and t.category == "food")
        if food_count > 15:
            tips.append(
                "🍲 You're eating out quite often! Meal prepping on Sundays can save you "
                "both time and money. Try it for a week!"
            )

        if expenses > 0 and expenses > income * 0.8:
            tips.append(
                f"📊 You're using 80%+ of your income! Use {self.product}'s analytics to identify "
                "your top 3 expenses and see where you can trim ₹1000-2000."
            )

        if len(transactions) > 20:
            tips.append(
                f"📈 You're doing great tracking in {self.product}! Check your charts regularly - "
                "visual patterns help you make better money decisions."
            )

        pool = [tip.format(product=self.product) for tip in GENERAL_TIPS]
        while len(tips) < MIN_TIPS and pool:
            tips.append(pool.pop(self.rng.randrange(len(pool))))

        return tips[:MAX_TIPS]


def clean_tips(text: str) -> list[str]:
    """Split model output into at most five emoji-prefixed tips."""
    tips = []
    for line in text.split("\n"):
        tip = line.strip()
        if not 20 < len(tip) < 300:
            continue
        tip = LEADING_BULLETS.sub("", tip)
        tip = WRAPPING_QUOTES.sub("", tip)
        if not STARTS_WITH_EMOJI.match(tip):
            tip = "💡 " + tip
        tips.append(tip)
    return tips[:MAX_TIPS]


def _history_block(history: list[ConversationTurn] | None) -> str:
    if not history:
        return ""
    lines = [f"{turn.sender}: {turn.text}" for turn in history[-MAX_HISTORY_TURNS:]]
    return "\nRecent conversation:\n" + "\n".join(lines) + "\n"
