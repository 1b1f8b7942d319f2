"""DeepSeek wallet balance: GET /user/balance with Bearer token.

Known reply shapes:
    {"is_available": true, "balance_infos": [{"currency": "CNY", "total_balance": "110.00", ...}]}
    {"balance": 10.5, "currency": "USD"}
    {"balance_usd": 10.5}
    {"available_balance": 10.5} / {"total_balance": 10.5}
"""

from __future__ import annotations

from typing import Any, ClassVar, Optional

from tokerz.balances import BalanceSource, Extracted, Extractor, first_number, first_text
from tokerz.models import RateLimitSpec

_INFO_FIELDS = (
    "balance", "available_balance", "remaining_balance",
    "balance_usd", "amount", "total_balance",
)


def from_balance_infos(payload: Any) -> Optional[Extracted]:
    infos = payload.get("balance_infos") if isinstance(payload, dict) else None
    if not isinstance(infos, list) or not infos:
        return None
    info = infos[0]
    balance = first_number(info, _INFO_FIELDS)
    if balance is None:
        return None
    return balance, first_text(info, ("currency", "unit")), None


def _root_extractor(*fields: str) -> Extractor:
    def extract(payload: Any) -> Optional[Extracted]:
        balance = first_number(payload, fields)
        if balance is None:
            return None
        return balance, first_text(payload, ("currency",)), None

    extract.__name__ = f"from_root_{fields[0]}"
    return extract


from_root_balance = _root_extractor("balance", "balance_usd")
from_available_balance = _root_extractor("available_balance")
from_total_balance = _root_extractor("total_balance")


class DeepSeekSource(BalanceSource):
    name: ClassVar[str] = "deepseek"
    display_name: ClassVar[str] = "DeepSeek"
    endpoint: ClassVar[str] = "https://api.deepseek.com/user/balance"
    currency: ClassVar[str] = "USD"
    rate_limit: ClassVar[Optional[RateLimitSpec]] = RateLimitSpec(max_requests=60, window_seconds=60)
    extractors: ClassVar[tuple[Extractor, ...]] = (
        from_balance_infos,
        from_root_balance,
        from_available_balance,
        from_total_balance,
    )

    def build_headers(self, secret: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {secret}", "Content-Type": "application/json"}
