"""Execution core: run one call descriptor under a fixed strategy."""

import logging

from eth_account.signers.local import LocalAccount
from web3 import AsyncWeb3
from web3.contract.async_contract import AsyncContractFunction
from web3.exceptions import ContractLogicError

from ._exceptions import TransactionFailedError
from .codec import encode_call_descriptor
from .guards import require_provider, require_signer
from .helpers import TxParams, build_tx_params
from .types import (
    CallDescriptor,
    EncodeResult,
    EstimateResult,
    ExecutionResult,
    ExecutionStrategy,
    SendResult,
)

logger = logging.getLogger(__name__)


def _revert_reason(error: ContractLogicError) -> str:
    return error.message or str(error)


class TransactionEngine:
    """
    Executes call descriptors as a send, a gas estimate, or encoded call data.

    The strategy is fixed at construction. A client that needs both an
    estimate and a send holds two engines built from the same connection.

    Nothing here retries. A transport error during a send propagates as-is,
    since a retry could broadcast the same transaction twice.

    Example:
        >>> engine = TransactionEngine(w3, account, ExecutionStrategy.ESTIMATE, chain_id=1)
        >>> result = await engine.execute(descriptor)
        >>> result.gas
        84211
    """

    def __init__(
        self,
        w3: AsyncWeb3 | None,
        account: LocalAccount | None,
        strategy: ExecutionStrategy,
        chain_id: int,
    ) -> None:
        self.w3 = w3
        self.account = account
        self.strategy = ExecutionStrategy(strategy)
        self.chain_id = chain_id

    def _contract_function(self, descriptor: CallDescriptor) -> AsyncContractFunction:
        w3 = require_provider(self.w3)
        contract = w3.eth.contract(address=descriptor.address, abi=descriptor.abi)
        return getattr(contract.functions, descriptor.function_name)(*descriptor.args)

    def _call_params(self, descriptor: CallDescriptor) -> TxParams:
        params: TxParams = {}
        if self.account is not None:
            params["from"] = self.account.address
        if descriptor.value:
            params["value"] = descriptor.value
        return params

    async def _simulate(self, contract_call: AsyncContractFunction, descriptor: CallDescriptor) -> None:
        try:
            await contract_call.call(self._call_params(descriptor))
        except ContractLogicError as e:
            reason = _revert_reason(e)
            raise TransactionFailedError(
                f"Simulation of {descriptor.function_name} on {descriptor.address} reverted: {reason}",
                reason=reason,
            ) from e

    async def execute(self, descriptor: CallDescriptor) -> ExecutionResult:
        """
        Execute ``descriptor`` under the configured strategy.

        Returns:
            SendResult, EstimateResult or EncodeResult, matching the strategy

        Raises:
            MissingProviderError: No chain connection
            MissingSignerError: Send strategy without a signing account
            TransactionFailedError: The simulation or estimate reverted
        """
        if self.strategy == ExecutionStrategy.ESTIMATE:
            return await self.estimate(descriptor)
        if self.strategy == ExecutionStrategy.ENCODE:
            return await self.encode(descriptor)
        return await self.send(descriptor)

    async def estimate(self, descriptor: CallDescriptor) -> EstimateResult:
        contract_call = self._contract_function(descriptor)
        try:
            gas = await contract_call.estimate_gas(self._call_params(descriptor))
        except ContractLogicError as e:
            reason = _revert_reason(e)
            raise TransactionFailedError(
                f"Gas estimation of {descriptor.function_name} on {descriptor.address} reverted: {reason}",
                reason=reason,
            ) from e
        return EstimateResult(gas=gas)

    async def encode(self, descriptor: CallDescriptor) -> EncodeResult:
        contract_call = self._contract_function(descriptor)
        await self._simulate(contract_call, descriptor)
        return EncodeResult(
            address=descriptor.address,
            data=encode_call_descriptor(descriptor),
            value=descriptor.value,
            function_name=descriptor.function_name,
        )

    async def send(self, descriptor: CallDescriptor) -> SendResult:
        """Simulate, sign and broadcast. Does not wait for the receipt."""
        w3 = require_provider(self.w3)
        account = require_signer(w3, self.account)
        contract_call = self._contract_function(descriptor)

        await self._simulate(contract_call, descriptor)

        try:
            tx_params = await build_tx_params(
                w3,
                account.address,
                self.chain_id,
                overrides=descriptor.overrides,
                contract_call=contract_call,
                value=descriptor.value,
            )
            tx = await contract_call.build_transaction(tx_params)
        except ContractLogicError as e:
            reason = _revert_reason(e)
            raise TransactionFailedError(
                f"Preparing {descriptor.function_name} on {descriptor.address} reverted: {reason}",
                reason=reason,
            ) from e

        # Sign and send
        signed = account.sign_transaction(tx)
        tx_hash = await w3.eth.send_raw_transaction(signed.raw_transaction)

        logger.debug(
            "Broadcast %s on %s (chain %s): %s",
            descriptor.function_name,
            descriptor.address,
            self.chain_id,
            AsyncWeb3.to_hex(tx_hash),
        )
        return SendResult(tx_hash=AsyncWeb3.to_hex(tx_hash))
