# easybook/contract/hotel_rating.py
from typing import List

from easybook.contract.base import EntityContract, transaction
from easybook.contract.context import TransactionContext
from easybook.core.types import Hotel

SEED_HOTELS = (
    Hotel(id="hotel1", name="Venice", is_active=True, rating=5.0),
    Hotel(id="hotel2", name="Milan", is_active=True, rating=4.5),
    Hotel(id="hotel3", name="Roma", is_active=True, rating=4.2),
)


class HotelRatingContract(EntityContract[Hotel]):
    """Manages hotel ratings as flat records."""

    name = "hotel-rating"
    entity_type = Hotel

    def seed(self):
        return SEED_HOTELS

    @transaction("InitLedger")
    def init(self, ctx: TransactionContext) -> None:
        self.init_ledger(ctx)

    @transaction("CreateHotel")
    def create_hotel(self, ctx: TransactionContext, id: str, name: str, is_active: bool, rating: float) -> None:
        self.create(ctx, Hotel(id=id, name=name, is_active=is_active, rating=rating))

    @transaction("ReadHotel", submit=False)
    def read_hotel(self, ctx: TransactionContext, id: str) -> Hotel:
        return self.read(ctx, id)

    @transaction("UpdateHotel")
    def update_hotel(self, ctx: TransactionContext, id: str, name: str, is_active: bool, rating: float) -> None:
        self.update(ctx, Hotel(id=id, name=name, is_active=is_active, rating=rating))

    @transaction("DeleteHotel")
    def delete_hotel(self, ctx: TransactionContext, id: str) -> None:
        self.delete(ctx, id)

    @transaction("HotelExists", submit=False)
    def hotel_exists(self, ctx: TransactionContext, id: str) -> bool:
        return self.exists(ctx, id)

    @transaction("GetAllHotels", submit=False)
    def get_all_hotels(self, ctx: TransactionContext) -> List[Hotel]:
        return self.list_all(ctx)
