"""Access-control condition models.

An ``AccessCondition`` is a read-only contract call that the threshold
network evaluates at decrypt time.  Predicate arguments are a tagged
variant: either a literal value or the caller-address placeholder, which
only the external evaluator substitutes with the requesting signer's
address.

The wire form is the Lit ``evmContractConditions`` JSON shape.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

CALLER_ADDRESS_TOKEN = ":userAddress"


class LiteralArg(BaseModel):
    """A predicate argument passed to the contract unchanged."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["literal"] = "literal"
    value: str


class CallerAddressPlaceholder(BaseModel):
    """Stands for the address of whoever requests decryption."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["caller_address"] = "caller_address"


PredicateArg = Annotated[
    Union[LiteralArg, CallerAddressPlaceholder], Field(discriminator="kind")
]


def arg_to_wire(arg: LiteralArg | CallerAddressPlaceholder) -> str:
    if isinstance(arg, CallerAddressPlaceholder):
        return CALLER_ADDRESS_TOKEN
    return arg.value


def arg_from_wire(raw: Any) -> LiteralArg | CallerAddressPlaceholder:
    if raw == CALLER_ADDRESS_TOKEN:
        return CallerAddressPlaceholder()
    return LiteralArg(value=str(raw))


class AbiParam(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    type: str


class FunctionAbi(BaseModel):
    """ABI fragment of the predicate function."""

    model_config = ConfigDict(frozen=True)

    name: str
    inputs: tuple[AbiParam, ...] = ()
    outputs: tuple[AbiParam, ...] = ()
    state_mutability: str = "view"
    type: str = "function"

    def to_wire(self) -> dict[str, Any]:
        return {
            "inputs": [p.model_dump() for p in self.inputs],
            "name": self.name,
            "outputs": [p.model_dump() for p in self.outputs],
            "stateMutability": self.state_mutability,
            "type": self.type,
        }

    @classmethod
    def from_wire(cls, raw: dict[str, Any]) -> FunctionAbi:
        return cls(
            name=raw["name"],
            inputs=tuple(AbiParam(**p) for p in raw.get("inputs", [])),
            outputs=tuple(AbiParam(**p) for p in raw.get("outputs", [])),
            state_mutability=raw.get("stateMutability", "view"),
            type=raw.get("type", "function"),
        )


class ReturnValueTest(BaseModel):
    """Comparison the evaluator applies to the predicate's return value."""

    model_config = ConfigDict(frozen=True)

    key: str = ""
    comparator: str = "="
    value: str = "true"


class AccessCondition(BaseModel):
    """A contract-call condition evaluated by the threshold network.

    Examples
    --------
    >>> cond = AccessCondition(
    ...     contract_address="0x83F569503ee532A60e90Ab00fF6BC265826556e0",
    ...     function_name="hasSongAccess",
    ...     function_params=(CallerAddressPlaceholder(), LiteralArg(value="1")),
    ...     function_abi=FunctionAbi(name="hasSongAccess"),
    ...     chain="baseSepolia",
    ... )
    >>> cond.to_wire()["functionParams"]
    [':userAddress', '1']
    """

    model_config = ConfigDict(frozen=True)

    contract_address: str
    function_name: str
    function_params: tuple[PredicateArg, ...]
    function_abi: FunctionAbi
    chain: str
    return_value_test: ReturnValueTest = ReturnValueTest()

    def to_wire(self) -> dict[str, Any]:
        """Serialize to the Lit ``evmContractConditions`` entry shape."""
        return {
            "contractAddress": self.contract_address,
            "functionName": self.function_name,
            "functionParams": [arg_to_wire(a) for a in self.function_params],
            "functionAbi": self.function_abi.to_wire(),
            "chain": self.chain,
            "returnValueTest": self.return_value_test.model_dump(),
        }

    @classmethod
    def from_wire(cls, raw: dict[str, Any]) -> AccessCondition:
        return cls(
            contract_address=raw["contractAddress"],
            function_name=raw["functionName"],
            function_params=tuple(arg_from_wire(p) for p in raw["functionParams"]),
            function_abi=FunctionAbi.from_wire(raw["functionAbi"]),
            chain=raw["chain"],
            return_value_test=ReturnValueTest(**raw.get("returnValueTest", {})),
        )
