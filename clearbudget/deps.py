from clearbudget.advisor.advisor import FinancialAdvisor
from clearbudget.chat.router import IntentRouter
from clearbudget.config import get_settings
from clearbudget.db.repository import TransactionRepository
from clearbudget.llm.client import build_model_client
from clearbudget.parsing.extractor import TransactionExtractor

settings = get_settings()

repo = TransactionRepository(settings.db_path)
model_client = build_model_client(settings)
extractor = TransactionExtractor(model_client)
advisor = FinancialAdvisor(model_client, product_name=settings.product_name)
intent_router = IntentRouter(extractor, advisor, product_name=settings.product_name)
