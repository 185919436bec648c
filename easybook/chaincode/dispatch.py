# easybook/chaincode/dispatch.py
"""
Invocation boundary: a function name plus text arguments in, bytes or a failure message out.
"""
import inspect
import logging
import typing
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Sequence

from easybook.contract.base import EntityContract
from easybook.contract.context import TransactionContext
from easybook.core.args import parse_bool, parse_decimal, parse_service_levels, parse_text
from easybook.core.canon import canonical_json
from easybook.core.errors import ContractError, ValidationError
from easybook.core.types import Entity, ServiceLevel

logger = logging.getLogger(__name__)

OK = 200
ERROR = 500

PARSERS: Dict[Any, Callable[[str], Any]] = {
    str: parse_text,
    bool: parse_bool,
    float: parse_decimal,
    List[ServiceLevel]: parse_service_levels,
}


@dataclass(frozen=True)
class Response:
    status: int
    payload: bytes = b""
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.status == OK


@dataclass(frozen=True)
class Function:
    name: str
    method: Callable
    params: List[inspect.Parameter]
    parsers: List[Callable[[str], Any]]
    submit: bool

    @property
    def required(self) -> int:
        return sum(1 for p in self.params if p.default is inspect.Parameter.empty)


def _unwrap_optional(hint: Any) -> Any:
    if typing.get_origin(hint) is typing.Union:
        args = [a for a in typing.get_args(hint) if a is not type(None)]
        if len(args) == 1:
            return args[0]
    return hint


def _describe(contract_type: type) -> Dict[str, Function]:
    functions = {}
    for public, method in contract_type.transactions().items():
        hints = typing.get_type_hints(method)
        # Drop self and ctx
        params = list(inspect.signature(method).parameters.values())[2:]
        parsers = []
        for param in params:
            hint = _unwrap_optional(hints[param.name])
            if hint not in PARSERS:
                raise TypeError(f"{public}: no argument parser for {param.name}: {hint!r}")
            parsers.append(PARSERS[hint])
        functions[public] = Function(public, method, params, parsers, method.__submit__)
    return functions


def encode_result(result: Any) -> bytes:
    if result is None:
        return b""
    if isinstance(result, bool):
        return b"true" if result else b"false"
    if isinstance(result, Entity):
        return result.encode()
    if isinstance(result, (list, tuple)):
        return canonical_json([item.to_dict() for item in result])
    raise TypeError(f"cannot encode result of type {type(result).__name__}")


class Chaincode:
    """Routes named invocations with text arguments to a contract."""

    def __init__(self, contract: EntityContract):
        self.contract = contract
        self._functions = _describe(type(contract))

    @property
    def name(self) -> str:
        return self.contract.name

    def functions(self) -> Dict[str, bool]:
        """Public function name → True for submit (write) functions, False for evaluate."""
        return {name: fn.submit for name, fn in self._functions.items()}

    def parse_args(self, function: str, args: Sequence[str]) -> List[Any]:
        fn = self._functions[function]
        if not fn.required <= len(args) <= len(fn.params):
            expected = str(len(fn.params)) if fn.required == len(fn.params) else f"{fn.required}-{len(fn.params)}"
            raise ValidationError(
                f"incorrect number of params. Expected {expected}, received {len(args)}"
            )
        parsed = []
        for param, parser, raw in zip(fn.params, fn.parsers, args):
            try:
                parsed.append(parser(raw))
            except ValidationError as e:
                raise ValidationError(f"error managing parameter {param.name}: {e}") from e
        return parsed

    def invoke(self, ctx: TransactionContext, function: str, args: Sequence[str] = ()) -> Response:
        fn = self._functions.get(function)
        if fn is None:
            return Response(ERROR, message=f"function {function} not found in contract {self.name}")

        try:
            parsed = self.parse_args(function, args)
            result = fn.method(self.contract, ctx, *parsed)
            payload = encode_result(result)
        except ContractError as e:
            logger.warning("[%s] %s %s failed: %s", ctx.tx_id, self.name, function, e)
            return Response(ERROR, message=str(e))

        return Response(OK, payload=payload)
