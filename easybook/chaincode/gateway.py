# easybook/chaincode/gateway.py
"""
Client-side session: submit and evaluate transactions against a local world state.
"""
import logging
from typing import Dict

from easybook.chaincode.dispatch import Chaincode
from easybook.contract import CONTRACTS
from easybook.contract.context import TransactionContext
from easybook.storage import RecordStore, create_storage

logger = logging.getLogger(__name__)


class TransactionError(Exception):
    """An invocation failed; carries the contract's message only."""

    def __init__(self, function: str, message: str):
        super().__init__(message)
        self.function = function
        self.message = message


class ContractClient:
    """Handle for one deployed contract, bound to its own keyspace."""

    def __init__(self, chaincode: Chaincode, store: RecordStore):
        self.chaincode = chaincode
        self.store = store

    def _run(self, function: str, args, commit: bool) -> bytes:
        with self.store.transaction(commit=commit):
            ctx = TransactionContext(stub=self.store)
            response = self.chaincode.invoke(ctx, function, [str(a) for a in args])
            if not response.ok:
                # Raising inside the transaction block rolls back every write of the invocation
                raise TransactionError(function, response.message)
        return response.payload

    def submit_transaction(self, function: str, *args) -> bytes:
        """Run a write transaction and commit it."""
        logger.info("--> Submit Transaction: %s %s", function, list(args))
        return self._run(function, args, commit=True)

    def evaluate_transaction(self, function: str, *args) -> bytes:
        """Run a query; any writes it makes are discarded."""
        logger.info("--> Evaluate Transaction: %s %s", function, list(args))
        return self._run(function, args, commit=False)


class Gateway:
    """
    Session against a storage URI (memory:// or sqlite://...).
    Each contract name gets an independent keyspace.
    """

    def __init__(self, uri: str):
        self.uri = uri
        self._stores: Dict[str, RecordStore] = {}

    @classmethod
    def connect(cls, uri: str) -> "Gateway":
        return cls(uri)

    def _store_for(self, name: str) -> RecordStore:
        if name not in self._stores:
            self._stores[name] = create_storage(self.uri, namespace=name)
        return self._stores[name]

    def get_contract(self, name: str) -> ContractClient:
        contract_type = CONTRACTS.get(name)
        if contract_type is None:
            raise ValueError(f"Unknown contract: {name} (known: {', '.join(sorted(CONTRACTS))})")
        return ContractClient(Chaincode(contract_type()), self._store_for(name))

    def close(self) -> None:
        for store in self._stores.values():
            store.close()
        self._stores.clear()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
