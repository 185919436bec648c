# easybook/core/types.py
from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, List, Type, TypeVar

from easybook.core.canon import canonical_json, load_json
from easybook.core.errors import DecodeError

E = TypeVar("E", bound="Entity")


def _field(data: Dict[str, Any], name: str, kind: str) -> Any:
    if name not in data:
        raise DecodeError(f"missing field '{name}'")
    value = data[name]

    # bool is an int subclass, so every branch rules it out explicitly
    if kind == "str" and isinstance(value, str):
        return value
    if kind == "bool" and isinstance(value, bool):
        return value
    if kind == "float" and isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    if kind == "int" and not isinstance(value, bool):
        if isinstance(value, int):
            return value
        if isinstance(value, float) and value.is_integer():
            return int(value)
    raise DecodeError(f"field '{name}' is not a valid {kind}: {value!r}")


def _items(data: Dict[str, Any], name: str) -> List[Any]:
    # Empty sequences may have been written as null
    value = data.get(name)
    if value is None:
        return []
    if not isinstance(value, list):
        raise DecodeError(f"field '{name}' is not a list: {value!r}")
    return value


def _object(value: Any, what: str) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise DecodeError(f"{what} is not a JSON object: {value!r}")
    return value


class Entity:
    """Top-level record addressable by its id in the world state."""

    kind: ClassVar[str] = "entity"
    id: str

    def to_dict(self) -> dict:
        raise NotImplementedError

    @classmethod
    def from_dict(cls: Type[E], data: Dict[str, Any]) -> E:
        raise NotImplementedError

    def encode(self) -> bytes:
        return canonical_json(self.to_dict())

    @classmethod
    def decode(cls: Type[E], data: bytes) -> E:
        return cls.from_dict(_object(load_json(data), cls.kind))


@dataclass(frozen=True)
class Hotel(Entity):
    """Hotel rating record (flat hotel-rating contract)."""
    kind: ClassVar[str] = "hotel"

    id: str
    name: str
    is_active: bool
    rating: float

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "isActive": self.is_active,
            "rating": self.rating,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Hotel":
        return cls(
            id=_field(data, "id", "str"),
            name=_field(data, "name", "str"),
            is_active=_field(data, "isActive", "bool"),
            rating=_field(data, "rating", "float"),
        )


@dataclass(frozen=True)
class Agreement:
    """Agreement owned by a service level. service_level_id / hotel_id are plain correlation ids."""
    id: str
    is_applied: bool = False
    total_feedbacks: int = 0
    total_unfulfilled_commitments: int = 0
    is_applied_penalty: bool = False
    total_compensations: int = 0
    total_no_compensations: int = 0
    service_level_id: str = ""
    hotel_id: str = ""

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "isApplied": self.is_applied,
            "totalFeedbacks": self.total_feedbacks,
            "totalUnfulfilledCommitments": self.total_unfulfilled_commitments,
            "isAppliedPenalty": self.is_applied_penalty,
            "totalCompensations": self.total_compensations,
            "totalNoCompensations": self.total_no_compensations,
            "serviceLevelId": self.service_level_id,
            "hotelId": self.hotel_id,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Agreement":
        data = _object(data, "agreement")
        return cls(
            id=_field(data, "id", "str"),
            is_applied=_field(data, "isApplied", "bool"),
            total_feedbacks=_field(data, "totalFeedbacks", "int"),
            total_unfulfilled_commitments=_field(data, "totalUnfulfilledCommitments", "int"),
            is_applied_penalty=_field(data, "isAppliedPenalty", "bool"),
            total_compensations=_field(data, "totalCompensations", "int"),
            total_no_compensations=_field(data, "totalNoCompensations", "int"),
            service_level_id=_field(data, "serviceLevelId", "str"),
            hotel_id=_field(data, "hotelId", "str"),
        )


@dataclass(frozen=True)
class ServiceLevel:
    """Service level embedded in a hotel; it has no key of its own."""
    id: str
    name: str
    is_used: bool = False
    satisfaction_rate: float = 0.0
    rule_abiding_rate: float = 0.0
    hotel_id: str = ""
    agreements: List[Agreement] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "isUsed": self.is_used,
            "satisfactionRate": self.satisfaction_rate,
            "ruleAbidingRate": self.rule_abiding_rate,
            "hotelId": self.hotel_id,
            "agreements": [a.to_dict() for a in self.agreements],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ServiceLevel":
        data = _object(data, "service level")
        return cls(
            id=_field(data, "id", "str"),
            name=_field(data, "name", "str"),
            is_used=_field(data, "isUsed", "bool"),
            satisfaction_rate=_field(data, "satisfactionRate", "float"),
            rule_abiding_rate=_field(data, "ruleAbidingRate", "float"),
            hotel_id=_field(data, "hotelId", "str"),
            agreements=[Agreement.from_dict(a) for a in _items(data, "agreements")],
        )


@dataclass(frozen=True)
class SlaHotel(Entity):
    """Hotel with its service levels and their agreements (easybook SLA contract)."""
    kind: ClassVar[str] = "hotel"

    id: str
    name: str
    is_active: bool
    rating: float
    service_levels: List[ServiceLevel] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "isActive": self.is_active,
            "rating": self.rating,
            "serviceLevels": [s.to_dict() for s in self.service_levels],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SlaHotel":
        return cls(
            id=_field(data, "id", "str"),
            name=_field(data, "name", "str"),
            is_active=_field(data, "isActive", "bool"),
            rating=_field(data, "rating", "float"),
            service_levels=[ServiceLevel.from_dict(s) for s in _items(data, "serviceLevels")],
        )
