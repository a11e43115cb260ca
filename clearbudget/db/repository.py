from tinydb import Query, TinyDB

from clearbudget.models.schemas import TransactionRecord, TransactionType


class TransactionRepository:
    def __init__(self, db_path: str = "clearbudget.json"):
        self.db = TinyDB(db_path)
        self.table = self.db.table("transactions")

    def _to_record(self, doc) -> TransactionRecord:
        data = {k: v for k, v in doc.items() if k != "owner"}
        return TransactionRecord(id=str(doc.doc_id), **data)

    def add(self, record: TransactionRecord, owner: str = "default") -> TransactionRecord:
        data = record.model_dump(mode="json", exclude={"id"})
        data["owner"] = owner
        doc_id = self.table.insert(data)
        return record.model_copy(update={"id": str(doc_id)})

    def get(self, id: str) -> TransactionRecord | None:
        if not id.isdigit():
            return None
        doc = self.table.get(doc_id=int(id))
        if doc is None:
            return None
        return self._to_record(doc)

    def get_all(self, owner: str = "default", tx_type: TransactionType | None = None) -> list[TransactionRecord]:
        Tx = Query()
        condition = Tx.owner == owner
        if tx_type:
            condition &= Tx.type == tx_type
        docs = sorted(self.table.search(condition), key=lambda doc: doc.doc_id)
        return [self._to_record(doc) for doc in docs]

    def update(self, id: str, **fields) -> TransactionRecord | None:
        if self.get(id) is None:
            return None
        # Filter out None values so we only update provided fields
        updates = {k: v for k, v in fields.items() if v is not None}
        if updates:
            self.table.update(updates, doc_ids=[int(id)])
        return self.get(id)

    def delete(self, id: str) -> bool:
        if self.get(id) is None:
            return False
        self.table.remove(doc_ids=[int(id)])
        return True
