"""Resolve decoded events from a confirmed transaction's receipt."""

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from hexbytes import HexBytes
from web3 import AsyncWeb3

from ._exceptions import TransactionFailedError
from .codec import decode_event_log, event_topic
from .guards import require_provider
from .types import EventRecord

logger = logging.getLogger(__name__)


def _topic_hex(topic: Any) -> str:
    return HexBytes(topic).to_0x_hex().lower()


class EventResolver:
    """
    Fetches a receipt and picks out the logs matching expected events.

    Logs are matched by topic0, never by position, so unrelated logs in the
    same transaction (token transfers, proxy initialization) are skipped.
    """

    def __init__(self, w3: AsyncWeb3 | None) -> None:
        self.w3 = w3

    async def get_receipt_logs(self, tx_hash: str) -> tuple[list[Mapping[str, Any]], int]:
        """Wait for confirmation and return the receipt's logs and status."""
        w3 = require_provider(self.w3)
        receipt = await w3.eth.wait_for_transaction_receipt(HexBytes(tx_hash))
        logger.debug("Receipt for %s: status=%s, %d log(s)", tx_hash, receipt["status"], len(receipt["logs"]))
        return list(receipt["logs"]), receipt["status"]

    async def get_transaction_events(
        self,
        tx_hash: str,
        event_abis: Sequence[Mapping[str, Any]],
        include_all: bool = False,
    ) -> list[EventRecord]:
        """
        Decode every log in ``tx_hash`` whose topic0 matches one of ``event_abis``.

        With ``include_all``, logs with no matching ABI are kept as records
        with ``name=None`` and undecoded args.

        Raises:
            TransactionFailedError: The transaction was mined but reverted
        """
        logs, status = await self.get_receipt_logs(tx_hash)
        if status == 0:
            raise TransactionFailedError(f"Transaction {tx_hash} reverted", reason="reverted")

        expected = {event_topic(abi): abi for abi in event_abis}
        records: list[EventRecord] = []
        for log in logs:
            topics = log.get("topics") or []
            if not topics:
                continue
            topic0 = _topic_hex(topics[0])
            event_abi = expected.get(topic0)
            if event_abi is None and not include_all:
                continue
            records.append(
                EventRecord(
                    name=event_abi["name"] if event_abi else None,
                    topic=topic0,
                    address=AsyncWeb3.to_checksum_address(log["address"]),
                    args=decode_event_log(event_abi, log) if event_abi else {},
                    log_index=log.get("logIndex"),
                    tx_hash=tx_hash,
                )
            )
        return records

    async def resolve_events(self, tx_hash: str, event_abis: Sequence[Mapping[str, Any]]) -> list[EventRecord]:
        """Like get_transaction_events, but at least one match is required."""
        records = await self.get_transaction_events(tx_hash, event_abis)
        if not records:
            names = ", ".join(str(abi.get("name")) for abi in event_abis)
            raise TransactionFailedError(
                f"No {names} event found in transaction {tx_hash}", reason="event_not_found"
            )
        return records

    async def resolve_event(self, tx_hash: str, event_abis: Sequence[Mapping[str, Any]]) -> EventRecord:
        """Return the first log in ``tx_hash`` matching one of ``event_abis``."""
        return (await self.resolve_events(tx_hash, event_abis))[0]
