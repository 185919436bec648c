# easybook/chaincode/__init__.py
"""
Invocation surface: dispatcher and the client session used to call it.
"""

from .dispatch import Chaincode, Response
from .gateway import ContractClient, Gateway, TransactionError

__all__ = ["Chaincode", "Response", "ContractClient", "Gateway", "TransactionError"]
