"""ElevenLabs character credits: GET /v1/user with xi-api-key header.

Balance is the remaining character allowance of the subscription. Keys
created without the user_read permission get a 401 (or occasionally a 200)
whose body carries ``{"detail": {"status": "missing_permissions"}}``.
"""

from __future__ import annotations

import json
from typing import Any, ClassVar, Optional

from tokerz.balances import BalanceSource, Extracted, Extractor, to_number
from tokerz.models import BalanceResult, RateLimitSpec

MISSING_PERMISSION_ERROR = (
    "ElevenLabs API key missing user_read permission. "
    "Balance checking not available for this key."
)


def _missing_permissions(payload: Any) -> bool:
    if not isinstance(payload, dict):
        return False
    detail = payload.get("detail")
    return isinstance(detail, dict) and detail.get("status") == "missing_permissions"


def from_subscription(payload: Any) -> Optional[Extracted]:
    sub = payload.get("subscription") if isinstance(payload, dict) else None
    if not isinstance(sub, dict):
        return None
    limit = to_number(sub.get("character_limit"))
    if limit is None:
        return None
    used = int(to_number(sub.get("character_count")) or 0)
    limit = int(limit)
    return float(max(0, limit - used)), "characters", {"used": used, "limit": limit}


class ElevenLabsSource(BalanceSource):
    name: ClassVar[str] = "elevenlabs"
    display_name: ClassVar[str] = "ElevenLabs"
    endpoint: ClassVar[str] = "https://api.elevenlabs.io/v1/user"
    currency: ClassVar[str] = "characters"
    rate_limit: ClassVar[Optional[RateLimitSpec]] = RateLimitSpec(max_requests=100, window_seconds=60)
    extractors: ClassVar[tuple[Extractor, ...]] = (from_subscription,)

    def build_headers(self, secret: str) -> dict[str, str]:
        return {"xi-api-key": secret, "Content-Type": "application/json"}

    def interpret_error(self, status_code: int, body: str) -> Optional[str]:
        if status_code != 401:
            return None
        try:
            payload = json.loads(body)
        except ValueError:
            return None
        return MISSING_PERMISSION_ERROR if _missing_permissions(payload) else None

    def parse(self, payload: Any) -> BalanceResult:
        if _missing_permissions(payload):
            return self.failure(MISSING_PERMISSION_ERROR)
        return super().parse(payload)
