# easybook/contract/base.py
import logging
from typing import Callable, ClassVar, Dict, Generic, List, Sequence, Type, TypeVar

from easybook.contract.context import TransactionContext
from easybook.core.errors import AlreadyExistsError, NotFoundError, StorageError
from easybook.core.types import Entity

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Entity)


def transaction(name: str, submit: bool = True) -> Callable:
    """
    Expose a contract method under a public function name.
    `submit=False` marks read-only functions that callers evaluate instead of submit.
    """
    def wrap(func):
        func.__transaction__ = name
        func.__submit__ = submit
        return func
    return wrap


class EntityContract(Generic[E]):
    """
    CRUD, enumeration and seeding of one entity type keyed by its id.
    Subclasses pick the entity type and seed data and publish the public
    function names; all storage semantics live here.
    """

    name: ClassVar[str] = ""
    entity_type: ClassVar[Type[Entity]]

    def seed(self) -> Sequence[E]:
        return ()

    @property
    def label(self) -> str:
        return self.entity_type.kind

    @classmethod
    def transactions(cls) -> Dict[str, Callable]:
        """Public function name → unbound method."""
        found = {}
        for klass in reversed(cls.__mro__):
            for attr in vars(klass).values():
                public = getattr(attr, "__transaction__", None)
                if public:
                    found[public] = attr
        return found

    def exists(self, ctx: TransactionContext, id: str) -> bool:
        # Presence only: the stored bytes are not decoded
        return ctx.stub.get(id) is not None

    def create(self, ctx: TransactionContext, entity: E) -> None:
        if self.exists(ctx, entity.id):
            raise AlreadyExistsError(f"the {self.label} {entity.id} already exists")

        try:
            ctx.stub.put(entity.id, entity.encode())
        except StorageError as e:
            raise StorageError(f"can not create {self.label} {entity.id}: {e}") from e
        logger.debug("[%s] created %s %s", ctx.tx_id, self.label, entity.id)

    def read(self, ctx: TransactionContext, id: str) -> E:
        value = ctx.stub.get(id)
        if value is None:
            raise NotFoundError(f"the {self.label} {id} does not exist")
        return self.entity_type.decode(value)

    def update(self, ctx: TransactionContext, entity: E) -> None:
        """Replace the whole record; nothing from the previous value is kept."""
        if not self.exists(ctx, entity.id):
            raise NotFoundError(f"the {self.label} {entity.id} does not exist")

        try:
            ctx.stub.put(entity.id, entity.encode())
        except StorageError as e:
            raise StorageError(f"can not update information for the {self.label} {entity.id}: {e}") from e
        logger.debug("[%s] updated %s %s", ctx.tx_id, self.label, entity.id)

    def delete(self, ctx: TransactionContext, id: str) -> None:
        if not self.exists(ctx, id):
            raise NotFoundError(f"the {self.label} {id} does not exist")

        try:
            ctx.stub.delete(id)
        except StorageError as e:
            raise StorageError(f"can not delete the {self.label} {id}: {e}") from e
        logger.debug("[%s] deleted %s %s", ctx.tx_id, self.label, id)

    def list_all(self, ctx: TransactionContext) -> List[E]:
        """
        Every entity in the keyspace, in ascending key order.
        The first undecodable value aborts the whole listing.
        """
        with ctx.stub.range_scan("", "") as results:
            return [self.entity_type.decode(kv.value) for kv in results]

    def init_ledger(self, ctx: TransactionContext) -> None:
        """Write the seed entities, overwriting whatever is stored at their ids."""
        seeds = list(self.seed())
        for entity in seeds:
            ctx.stub.put(entity.id, entity.encode())
        logger.info("[%s] seeded %d %s records", ctx.tx_id, len(seeds), self.label)
