# easybook/contract/sla.py
from typing import List, Optional

from easybook.contract.base import EntityContract, transaction
from easybook.contract.context import TransactionContext
from easybook.core.types import Agreement, ServiceLevel, SlaHotel

SEED_HOTELS = (
    SlaHotel(
        id="1",
        name="Rex Hotel",
        is_active=True,
        rating=8.4,
        service_levels=[
            ServiceLevel(
                id="1",
                name="Standard",
                is_used=True,
                satisfaction_rate=0.84,
                rule_abiding_rate=0.0,
                hotel_id="1",
                agreements=[
                    Agreement(
                        id="1",
                        is_applied=True,
                        total_feedbacks=100,
                        total_unfulfilled_commitments=16,
                        is_applied_penalty=False,
                    ),
                    Agreement(
                        id="2",
                        is_applied=True,
                        total_feedbacks=1000,
                        total_unfulfilled_commitments=100,
                        is_applied_penalty=False,
                    ),
                ],
            ),
        ],
    ),
)


class SlaContract(EntityContract[SlaHotel]):
    """
    Manages hotels together with their service levels and agreements.
    Service levels and agreements live inside the hotel record and are
    only ever written as part of it.
    """

    name = "easybook"
    entity_type = SlaHotel

    def seed(self):
        return SEED_HOTELS

    @transaction("InitLedger")
    def init(self, ctx: TransactionContext) -> None:
        self.init_ledger(ctx)

    @transaction("CreateHotel")
    def create_hotel(
        self,
        ctx: TransactionContext,
        id: str,
        name: str,
        is_active: bool,
        rating: float,
        service_levels: Optional[List[ServiceLevel]] = None,
    ) -> None:
        self.create(ctx, SlaHotel(id, name, is_active, rating, list(service_levels or [])))

    @transaction("ReadHotel", submit=False)
    def read_hotel(self, ctx: TransactionContext, id: str) -> SlaHotel:
        return self.read(ctx, id)

    @transaction("UpdateHotel")
    def update_hotel(
        self,
        ctx: TransactionContext,
        id: str,
        name: str,
        is_active: bool,
        rating: float,
        service_levels: Optional[List[ServiceLevel]] = None,
    ) -> None:
        self.update(ctx, SlaHotel(id, name, is_active, rating, list(service_levels or [])))

    @transaction("DeleteHotel")
    def delete_hotel(self, ctx: TransactionContext, id: str) -> None:
        self.delete(ctx, id)

    @transaction("HotelExists", submit=False)
    def hotel_exists(self, ctx: TransactionContext, id: str) -> bool:
        return self.exists(ctx, id)

    @transaction("GetAllHotels", submit=False)
    def get_all_hotels(self, ctx: TransactionContext) -> List[SlaHotel]:
        return self.list_all(ctx)
