from typing import Any, Optional


class GatewayError(Exception):
    """Base class for every failure surfaced by the query gateway."""


class TransportError(GatewayError):
    """The backend could not be reached (connection, timeout, HTTP status)."""


class DecodeError(GatewayError, ValueError):
    """A payload that must be strictly parsed was malformed."""


class UnsupportedChainError(GatewayError, ValueError):
    """The fallback adapter has no endpoint for the requested chain."""

    def __init__(self, chain_id: str) -> None:
        super().__init__(f"No RPC endpoint configured for chain {chain_id!r}.")
        self.chain_id = chain_id


class UpstreamAPIError(GatewayError):
    def __init__(self, status: str, message: str) -> None:
        super().__init__(f"Etherscan API error: {status} - {message}")
        self.status = status
        self.message = message


class PaidPlanRequiredError(GatewayError):
    """Etherscan answered NOTOK: the chain is gated behind a paid plan."""

    def __init__(self, detail: str = "") -> None:
        text = "Etherscan API: this chain requires a paid plan"
        if detail:
            text = f"{text}: {detail}"
        super().__init__(text)
        self.detail = detail


class UpstreamRPCError(GatewayError):
    def __init__(self, code: Optional[Any], message: str) -> None:
        super().__init__(f"JSON-RPC error: {code} - {message}")
        self.code = code
        self.message = message
