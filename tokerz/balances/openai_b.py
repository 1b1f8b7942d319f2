"""OpenAI: usage-based billing, no prepaid wallet to query."""

from __future__ import annotations

from typing import ClassVar

from tokerz.balances import BalanceSource


class OpenAISource(BalanceSource):
    name: ClassVar[str] = "openai"
    display_name: ClassVar[str] = "OpenAI"
    endpoint: ClassVar[str] = "https://api.openai.com/v1/usage"
    supports_balance: ClassVar[bool] = False
    unsupported_reason: ClassVar[str] = "OpenAI uses usage-based billing, no balance available"

    def build_headers(self, secret: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {secret}"}
