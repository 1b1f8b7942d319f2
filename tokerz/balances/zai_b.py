"""Z.ai balance: GET /v1/user/balance, Bearer. GLM-compatible reply shapes."""

from __future__ import annotations

from typing import ClassVar, Optional

from tokerz.balances.thudm_b import ThudmSource
from tokerz.models import RateLimitSpec


class ZaiSource(ThudmSource):
    name: ClassVar[str] = "zai"
    display_name: ClassVar[str] = "Z.ai"
    endpoint: ClassVar[str] = "https://api.z.ai/v1/user/balance"
    currency: ClassVar[str] = "USD"
    rate_limit: ClassVar[Optional[RateLimitSpec]] = RateLimitSpec(max_requests=60, window_seconds=60)
