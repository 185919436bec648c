# easybook/contract/context.py
from dataclasses import dataclass, field
from uuid import uuid4

from easybook.storage import RecordStore


@dataclass(frozen=True)
class TransactionContext:
    """
    Per-invocation handle. Contracts are stateless: every read and write
    goes through `stub`, never through state captured on the contract.
    """
    stub: RecordStore
    tx_id: str = field(default_factory=lambda: uuid4().hex)
