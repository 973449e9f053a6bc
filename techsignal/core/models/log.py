"""EVM event log models."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


def _hex_to_int(value: Any) -> int:
    """Parse a JSON-RPC hex quantity ("0x1a") or pass through an int."""
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        return int(value, 16) if value.startswith(("0x", "0X")) else int(value)
    raise ValueError(f"Invalid quantity: {value!r}")


class LogFilter(BaseModel):
    """Address/topic filter shared by every window of a log walk."""

    model_config = ConfigDict(frozen=True)

    address: str | None = None
    topics: list[str | list[str] | None] = Field(default_factory=list)

    def to_params(self, from_block: int, to_block: int) -> dict[str, Any]:
        """Build the ``eth_getLogs`` filter object for one block window."""
        params: dict[str, Any] = {
            "fromBlock": hex(from_block),
            "toBlock": hex(to_block),
            "topics": list(self.topics),
        }
        if self.address:
            params["address"] = self.address
        return params


class LogRecord(BaseModel):
    """A single event log entry."""

    model_config = ConfigDict(frozen=True)

    block_number: int
    log_index: int = 0
    address: str = ""
    topics: list[str] = Field(default_factory=list)
    data: str = "0x"
    transaction_hash: str | None = None
    block_hash: str | None = None

    @property
    def sort_key(self) -> tuple[int, int]:
        """Chronological ordering key."""
        return (self.block_number, self.log_index)

    @classmethod
    def from_rpc(cls, raw: dict[str, Any]) -> "LogRecord":
        """Build a record from an ``eth_getLogs`` result entry."""
        log_index = raw.get("logIndex")
        return cls(
            block_number=_hex_to_int(raw["blockNumber"]),
            log_index=_hex_to_int(log_index) if log_index is not None else 0,
            address=raw.get("address") or "",
            topics=list(raw.get("topics") or []),
            data=raw.get("data") or "0x",
            transaction_hash=raw.get("transactionHash"),
            block_hash=raw.get("blockHash"),
        )
