"""Custom exceptions for splits-sdk."""


class SplitsError(Exception):
    """Base exception for splits-sdk."""


class InvalidConfigError(SplitsError):
    """Invalid client configuration."""


class MissingProviderError(InvalidConfigError):
    """A chain connection is required for this action."""


class MissingSignerError(InvalidConfigError):
    """A signing account is required for this action."""


class UnsupportedChainIdError(InvalidConfigError):
    """Unsupported chain ID."""

    def __init__(self, chain_id: int, supported: list[int] | None = None) -> None:
        message = f"Chain {chain_id} is not supported"
        if supported:
            message += f" (supported: {', '.join(str(c) for c in supported)})"
        super().__init__(message)
        self.chain_id = chain_id
        self.supported = supported or []


class UnsupportedSubgraphChainIdError(UnsupportedChainIdError):
    """No indexer is configured for this chain."""


class InvalidArgumentError(SplitsError, ValueError):
    """An argument failed validation before any I/O."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class InvalidAuthError(SplitsError):
    """The signing account is not allowed to perform this action."""


class AccountNotFoundError(SplitsError):
    """The indexer has no record for the requested entity.

    This may reflect indexing lag rather than non-existence.
    """


class IndexerError(SplitsError):
    """The indexer returned an error payload."""


class TransactionFailedError(SplitsError):
    """Transaction failed.

    Raised when a simulation reverts or when a confirmed transaction does not
    contain the expected event.
    """

    def __init__(self, message: str = "Transaction failed", reason: str | None = None) -> None:
        super().__init__(message)
        self.reason = reason
