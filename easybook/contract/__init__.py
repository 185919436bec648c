# easybook/contract/__init__.py
"""
Contracts: the invocable CRUD / enumeration / seed operations over the world state.
"""

from .context import TransactionContext
from .base import EntityContract, transaction
from .hotel_rating import HotelRatingContract
from .sla import SlaContract

CONTRACTS = {
    HotelRatingContract.name: HotelRatingContract,
    SlaContract.name: SlaContract,
}

__all__ = ["TransactionContext", "EntityContract", "transaction", "HotelRatingContract", "SlaContract", "CONTRACTS"]
