"""Anthropic: usage-based billing, no prepaid wallet to query."""

from __future__ import annotations

from typing import ClassVar

from tokerz.balances import BalanceSource


class ClaudeSource(BalanceSource):
    name: ClassVar[str] = "claude"
    display_name: ClassVar[str] = "Anthropic"
    endpoint: ClassVar[str] = "https://api.anthropic.com/v1/messages"
    supports_balance: ClassVar[bool] = False
    unsupported_reason: ClassVar[str] = "Anthropic uses usage-based billing, no balance available"

    def build_headers(self, secret: str) -> dict[str, str]:
        return {"x-api-key": secret, "anthropic-version": "2023-06-01"}
