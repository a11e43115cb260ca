from loguru import logger
from telegram import Update
from telegram.ext import (
    Application,
    CommandHandler,
    ContextTypes,
    MessageHandler,
    filters,
)

from clearbudget.advisor.summary import summarize
from clearbudget.config import get_settings
from clearbudget.deps import advisor, intent_router, repo
from clearbudget.models.schemas import (
    ConversationTurn,
    RecordTransactionAction,
    TransactionRecord,
    ViewChangeAction,
)
from clearbudget.utils.currency import format_inr, format_inr_with_units

settings = get_settings()

MAX_HISTORY_MESSAGES = 10


def _append_to_history(context: ContextTypes.DEFAULT_TYPE, sender: str, text: str) -> None:
    """Append a turn to the chat's transcript, trimming to max size."""
    history = context.user_data.setdefault("history", [])
    history.append({"sender": sender, "text": text})
    if len(history) > MAX_HISTORY_MESSAGES:
        context.user_data["history"] = history[-MAX_HISTORY_MESSAGES:]


def _owner(update: Update) -> str:
    return str(update.effective_chat.id)


def _summary_text(transactions: list[TransactionRecord]) -> str:
    if not transactions:
        return "No transactions yet. Tell me something like 'spent 250 on lunch'."

    summary = summarize(transactions)
    lines = [
        "*Your summary:*\n",
        f"Income: {format_inr(summary.total_income)}",
        f"Expenses: {format_inr(summary.total_expenses)}",
        f"*Balance: {format_inr(summary.balance)}*",
    ]
    if summary.category_totals:
        lines.append("\n*Top spending:*")
        for i, (category, amount) in enumerate(summary.category_totals[:5], 1):
            lines.append(f"{i}. {category} — {format_inr_with_units(amount)}")
    return "\n".join(lines)


async def start_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /start command."""
    await update.message.reply_text(
        f"Hey! I'm your {settings.product_name} buddy.\n\n"
        "Tell me about money you spent or received, or ask me for advice.\n\n"
        "Examples:\n"
        '• "Spent 250 on lunch"\n'
        '• "Received 5000 from salary"\n'
        '• "Bought coffee for 50"\n'
        '• "How can I save money?"\n\n'
        "Commands:\n"
        "/summary — Income, expenses and top categories\n"
        "/tips — Personalized money tips\n"
        "/help — Show this message"
    )


async def help_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /help command."""
    await start_command(update, context)


async def summary_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /summary command."""
    transactions = repo.get_all(owner=_owner(update))
    await update.message.reply_text(_summary_text(transactions), parse_mode="Markdown")


async def tips_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /tips command."""
    tips = await advisor.generate_tips(repo.get_all(owner=_owner(update)))
    await update.message.reply_text("\n\n".join(tips))


async def handle_message(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle incoming text messages — the main conversation entry point."""
    user_text = update.message.text.strip()
    owner = _owner(update)
    logger.info("Telegram message from {}: {}", owner, user_text)

    await update.message.chat.send_action("typing")

    history = [ConversationTurn(**turn) for turn in context.user_data.get("history", [])]
    transactions = repo.get_all(owner=owner)
    result = await intent_router.route(user_text, history, transactions)

    _append_to_history(context, "user", user_text)
    _append_to_history(context, "bot", result.reply)

    if isinstance(result, RecordTransactionAction):
        stored = repo.add(result.transaction, owner=owner)
        logger.info("Recorded transaction #{} for {}", stored.id, owner)
        await update.message.reply_text(result.reply)
        return

    if isinstance(result, ViewChangeAction):
        if result.view == "tips":
            await tips_command(update, context)
        else:
            # No charts in chat; the summary stands in for both views
            await update.message.reply_text(_summary_text(transactions), parse_mode="Markdown")
        return

    await update.message.reply_text(result.reply)


def build_bot_app() -> Application:
    """Build and return the Telegram bot application."""
    app = Application.builder().token(settings.telegram_bot_token).build()

    app.add_handler(CommandHandler("start", start_command))
    app.add_handler(CommandHandler("help", help_command))
    app.add_handler(CommandHandler("summary", summary_command))
    app.add_handler(CommandHandler("tips", tips_command))

    app.add_handler(MessageHandler(filters.TEXT & ~filters.COMMAND, handle_message))

    return app
