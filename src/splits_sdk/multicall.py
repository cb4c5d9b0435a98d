"""Fold several contract calls into one Multicall3 ``aggregate`` call."""

from collections.abc import Sequence

from ._exceptions import InvalidArgumentError
from .abi import MULTICALL_ABI
from .codec import encode_call_descriptor
from .types import CallDescriptor, EncodeResult, TransactionOverrides


def build_multicall_descriptor(
    calls: Sequence[CallDescriptor | EncodeResult],
    multicall_address: str,
    overrides: TransactionOverrides | None = None,
) -> CallDescriptor:
    """
    Build one ``aggregate`` descriptor from ``calls``, preserving their order.

    Inner calls may target different contracts. Each is given either as a
    descriptor (encoded here, without I/O) or as the output of an
    Encode-strategy client.

    ``aggregate`` reverts the whole batch if any inner call reverts. Inner
    calls run with the multicall contract as ``msg.sender`` and cannot carry
    native value.

    Raises:
        InvalidArgumentError: Empty batch, or an inner call carries value
    """
    if not calls:
        raise InvalidArgumentError("Multicall needs at least one call", field="calls")

    aggregated: list[tuple[str, bytes]] = []
    for index, call in enumerate(calls):
        if call.value:
            raise InvalidArgumentError(
                f"Call {index} carries value, which aggregate cannot forward", field="calls"
            )
        if isinstance(call, CallDescriptor):
            target, data = call.address, encode_call_descriptor(call)
        else:
            target, data = call.address, call.data
        aggregated.append((target, bytes.fromhex(data.removeprefix("0x"))))

    return CallDescriptor(
        address=multicall_address,
        abi=MULTICALL_ABI,
        function_name="aggregate",
        args=(aggregated,),
        overrides=overrides,
    )
