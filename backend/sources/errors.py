from __future__ import annotations


class CampusMapError(Exception):
    """Base class for every recoverable data-acquisition failure."""


class NoEmbeddedPayload(CampusMapError):
    """The archive holds no entry ending with the markup suffix (or is not an archive)."""


class NetworkLinkOnly(CampusMapError):
    """The markup only references another resource and carries no placemarks inline."""


class MalformedMarkup(CampusMapError):
    """The payload could not be decoded or parsed as markup."""


class HttpFailure(CampusMapError):
    def __init__(self, location: str, status: int | None, reason: str = "") -> None:
        self.location = location
        self.status = status
        self.reason = reason
        detail = f"HTTP {status}" if status is not None else "request failed"
        if reason:
            detail = f"{detail}: {reason}"
        super().__init__(f"{detail} ({location})")


class AllSourcesExhausted(CampusMapError):
    def __init__(self, failures: list[tuple[str, CampusMapError]]) -> None:
        # [(tier name, failure), ...] in attempt order
        self.failures = failures
        tried = ", ".join(f"{tier}: {err}" for tier, err in failures) or "no tiers"
        super().__init__(f"All sources exhausted ({tried})")


class EmptyDataset(CampusMapError):
    """The payload parsed fine but holds no usable place."""
