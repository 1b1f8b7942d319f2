"""Google Gemini: quota-based, nothing resembling a balance is exposed."""

from __future__ import annotations

from typing import ClassVar

from tokerz.balances import BalanceSource


class GeminiSource(BalanceSource):
    name: ClassVar[str] = "gemini"
    display_name: ClassVar[str] = "Google Gemini"
    endpoint: ClassVar[str] = "https://generativelanguage.googleapis.com/v1beta/models"
    supports_balance: ClassVar[bool] = False
    unsupported_reason: ClassVar[str] = "Google Gemini uses quota-based system, no balance available"

    def build_headers(self, secret: str) -> dict[str, str]:
        return {"x-goog-api-key": secret}
