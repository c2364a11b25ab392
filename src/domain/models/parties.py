"""Domain models for business parties."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Party:
    """Customer or supplier whose orders appear in a ledger."""

    party_id: int
    name: str


__all__ = ["Party"]
