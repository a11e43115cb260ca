from fastapi import APIRouter, HTTPException, Query
from loguru import logger

from clearbudget.advisor.summary import summarize
from clearbudget.deps import advisor, extractor, intent_router, repo
from clearbudget.llm.errors import AmountNotFound
from clearbudget.models.schemas import (
    ChatRequest,
    ChatResponse,
    CreateTransactionRequest,
    FinancialSummary,
    ParseRequest,
    RecordTransactionAction,
    TransactionRecord,
    TransactionType,
    UpdateTransactionRequest,
)
from clearbudget.parsing.categories import resolve_category
from clearbudget.parsing.patterns import new_record_id

router = APIRouter()


@router.post("/chat", response_model=ChatResponse)
async def chat(request: ChatRequest):
    logger.info("Chat message: {}", request.message)
    transactions = repo.get_all(owner=request.owner)
    result = await intent_router.route(request.message, request.history, transactions)

    if isinstance(result, RecordTransactionAction):
        stored = repo.add(result.transaction, owner=request.owner)
        logger.info("Recorded transaction #{} for {}", stored.id, request.owner)
        result = result.model_copy(update={"transaction": stored})

    return ChatResponse(result=result)


@router.post("/parse", response_model=TransactionRecord)
async def parse_message(request: ParseRequest):
    logger.info("Parsing message: {}", request.message)
    try:
        return await extractor.extract(request.message)
    except AmountNotFound as e:
        raise HTTPException(status_code=422, detail=str(e))


@router.get("/transactions", response_model=list[TransactionRecord])
def list_transactions(
    owner: str = "default",
    tx_type: TransactionType | None = Query(default=None, alias="type"),
):
    return repo.get_all(owner=owner, tx_type=tx_type)


@router.post("/transactions", response_model=TransactionRecord)
def create_transaction(request: CreateTransactionRequest):
    description = (request.description or "").strip() or request.type
    record = TransactionRecord(
        id=new_record_id("manual"),
        type=request.type,
        amount=request.amount,
        category=request.category or resolve_category(description, request.type),
        description=description,
    )
    created = repo.add(record, owner=request.owner)
    logger.info("Created transaction #{}", created.id)
    return created


@router.patch("/transactions/{transaction_id}", response_model=TransactionRecord)
def update_transaction(transaction_id: str, request: UpdateTransactionRequest):
    fields = request.model_dump(exclude_none=True)
    if "description" in fields:
        fields["description"] = fields["description"].strip()
        if not fields["description"]:
            del fields["description"]
    updated = repo.update(transaction_id, **fields)
    if updated is None:
        raise HTTPException(status_code=404, detail="Transaction not found")
    logger.info("Updated transaction #{}", transaction_id)
    return updated


@router.delete("/transactions/{transaction_id}")
def delete_transaction(transaction_id: str):
    if not repo.delete(transaction_id):
        raise HTTPException(status_code=404, detail="Transaction not found")
    logger.info("Deleted transaction #{}", transaction_id)
    return {"detail": "Transaction deleted"}


@router.get("/summary", response_model=FinancialSummary)
def get_summary(owner: str = "default"):
    return summarize(repo.get_all(owner=owner))


@router.get("/tips", response_model=list[str])
async def get_tips(owner: str = "default"):
    return await advisor.generate_tips(repo.get_all(owner=owner))
