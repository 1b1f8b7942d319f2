"""THUDM GLM (bigmodel.cn) account balance: GET /api/paas/v3/user/info, Bearer.

The balance object may sit under ``data``, under ``user_info`` or at the root.
"""

from __future__ import annotations

from typing import Any, ClassVar, Optional

from tokerz.balances import BalanceSource, Extracted, Extractor, first_number, first_text
from tokerz.models import RateLimitSpec

GLM_BALANCE_FIELDS = (
    "balance", "remaining_balance", "available_balance",
    "total_balance", "credit_balance",
)


def _glm_extractor(container: Optional[str]) -> Extractor:
    def extract(payload: Any) -> Optional[Extracted]:
        if not isinstance(payload, dict):
            return None
        obj = payload.get(container) if container else payload
        balance = first_number(obj, GLM_BALANCE_FIELDS)
        if balance is None:
            return None
        return balance, first_text(obj, ("currency", "unit")), None

    extract.__name__ = f"from_{container or 'root'}"
    return extract


from_data = _glm_extractor("data")
from_user_info = _glm_extractor("user_info")
from_root = _glm_extractor(None)

GLM_EXTRACTORS: tuple[Extractor, ...] = (from_data, from_user_info, from_root)


class ThudmSource(BalanceSource):
    name: ClassVar[str] = "thudm"
    display_name: ClassVar[str] = "THUDM"
    endpoint: ClassVar[str] = "https://open.bigmodel.cn/api/paas/v3/user/info"
    currency: ClassVar[str] = "CNY"
    rate_limit: ClassVar[Optional[RateLimitSpec]] = RateLimitSpec(max_requests=100, window_seconds=60)
    extractors: ClassVar[tuple[Extractor, ...]] = GLM_EXTRACTORS

    def build_headers(self, secret: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {secret}", "Content-Type": "application/json"}
