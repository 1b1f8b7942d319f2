"""Value types for key detection and balance lookups.

- frozen dataclasses: results are immutable once produced
- to_dict() gives a canonical field order so JSON output stays stable
- Category / UsageMetric as Literal so typos are caught by a type checker
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Optional

Category = Literal[
    "text",
    "image",
    "audio",
    "code",
    "development",
    "multimodal",
    "reasoning",
    "translation",
    "vision",
]

CATEGORIES: frozenset[str] = frozenset(Category.__args__)  # type: ignore[attr-defined]

UsageMetric = Literal["tokens", "requests", "characters", "images", "audio_seconds"]

USAGE_METRICS: frozenset[str] = frozenset(UsageMetric.__args__)  # type: ignore[attr-defined]


@dataclass(frozen=True)
class ProviderProfile:
    """Static description of one vendor/model combination."""

    id: str
    display_name: str
    category: Category
    company: str
    key_format: str
    usage_metric: UsageMetric = "tokens"
    usage_unit: str = "tokens"
    description: str = ""
    has_wallet_balance: bool = False
    generic: bool = False
    cost_per_unit: Optional[float] = None
    input_pricing: Optional[float] = None
    output_pricing: Optional[float] = None
    image_pricing: Optional[float] = None
    context_length: Optional[int] = None
    capabilities: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "display_name": self.display_name,
            "category": self.category,
            "company": self.company,
            "key_format": self.key_format,
            "usage_metric": self.usage_metric,
            "usage_unit": self.usage_unit,
            "has_wallet_balance": self.has_wallet_balance,
            "generic": self.generic,
            "cost_per_unit": self.cost_per_unit,
            "input_pricing": self.input_pricing,
            "output_pricing": self.output_pricing,
            "image_pricing": self.image_pricing,
            "context_length": self.context_length,
            "capabilities": list(self.capabilities),
            "description": self.description,
        }


@dataclass(frozen=True)
class DetectionResult:
    provider: Optional[str] = None
    confidence: float = 0.0
    matched_pattern: Optional[str] = None
    suggestions: tuple[str, ...] = ()

    @classmethod
    def unknown(cls) -> "DetectionResult":
        return cls()

    def to_dict(self) -> dict:
        return {
            "provider": self.provider,
            "confidence": round(self.confidence, 4),
            "matched_pattern": self.matched_pattern,
            "suggestions": list(self.suggestions),
        }


@dataclass(frozen=True)
class FormatCheck:
    is_valid: bool
    error: Optional[str] = None

    def to_dict(self) -> dict:
        return {"is_valid": self.is_valid, "error": self.error}


@dataclass(frozen=True)
class RateLimitSpec:
    max_requests: int
    window_seconds: float

    def to_dict(self) -> dict:
        return {"max_requests": self.max_requests, "window_seconds": self.window_seconds}


@dataclass(frozen=True)
class BalanceEntry:
    """One key in a batch lookup. `id` is the caller's handle, not the vendor."""

    id: str
    vendor_id: str
    secret: str = field(repr=False)


@dataclass(frozen=True)
class BalanceResult:
    """Normalized balance reply. A zero balance without error is a success."""

    balance: float
    currency: str
    last_updated: Optional[str] = None
    error: Optional[str] = None
    details: Optional[dict] = field(default=None, hash=False)

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failure(cls, error: str, currency: str = "USD") -> "BalanceResult":
        return cls(balance=0.0, currency=currency, error=error)

    def to_dict(self) -> dict:
        return {
            "balance": self.balance,
            "currency": self.currency,
            "last_updated": self.last_updated,
            "error": self.error,
            "details": self.details,
        }


@dataclass(frozen=True)
class CacheEntryInfo:
    key: str
    expired: bool
    expires_at: str

    def to_dict(self) -> dict:
        return {"key": self.key, "expired": self.expired, "expires_at": self.expires_at}


@dataclass(frozen=True)
class CacheInfo:
    total_entries: int
    entries: tuple[CacheEntryInfo, ...] = ()
    hits: int = 0
    misses: int = 0

    def to_dict(self) -> dict:
        return {
            "total_entries": self.total_entries,
            "entries": [e.to_dict() for e in self.entries],
            "hits": self.hits,
            "misses": self.misses,
        }


@dataclass(frozen=True)
class UsageEvent:
    """Planned or recorded usage for one provider call."""

    input_tokens: Optional[int] = None
    output_tokens: Optional[int] = None
    total_tokens: Optional[int] = None
    characters: Optional[int] = None
    images: Optional[int] = None
    audio_seconds: Optional[float] = None
    requests: Optional[int] = None


@dataclass(frozen=True)
class UsageCalculation:
    amount: float
    unit: str
    cost_usd: float
    breakdown: dict = field(default_factory=dict, hash=False)

    def to_dict(self) -> dict:
        return {
            "amount": self.amount,
            "unit": self.unit,
            "cost_usd": round(self.cost_usd, 8),
            "breakdown": {k: round(v, 8) for k, v in self.breakdown.items()},
        }
