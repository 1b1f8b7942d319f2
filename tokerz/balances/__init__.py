"""BalanceSource ABC with __init_subclass__ auto-registration.

Each vendor that exposes (or explicitly lacks) a wallet-balance endpoint gets
one module in this package holding a BalanceSource subclass. Defining the
class is enough to register it; the aggregator never needs editing.

Response parsing is an ordered tuple of shape extractors. Vendor APIs are
loosely documented and drift, so each extractor recognizes one known payload
shape and returns None when the shape is absent. The first extractor yielding
a non-negative balance wins.
"""

from __future__ import annotations

import importlib
import json
import math
import pkgutil
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, ClassVar, Iterable, Optional

from tokerz.models import BalanceResult, RateLimitSpec

# (balance, currency or None, extra figures or None)
Extracted = tuple[float, Optional[str], Optional[dict]]
Extractor = Callable[[Any], Optional[Extracted]]


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def to_number(value: Any) -> Optional[float]:
    """Lenient numeric coercion: finite numbers and numeric strings, else None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
    elif not isinstance(value, (int, float)):
        return None
    try:
        number = float(value)
    except (ValueError, OverflowError):
        return None
    return number if math.isfinite(number) else None


def first_number(obj: Any, fields: Iterable[str]) -> Optional[float]:
    if not isinstance(obj, dict):
        return None
    for name in fields:
        number = to_number(obj.get(name))
        if number is not None:
            return number
    return None


def first_text(obj: Any, fields: Iterable[str]) -> Optional[str]:
    if not isinstance(obj, dict):
        return None
    for name in fields:
        value = obj.get(name)
        if isinstance(value, str) and value:
            return value
    return None


class BalanceSource(ABC):
    """Base class for vendor balance endpoints.

    Subclasses auto-register by defining `name`, the normalized vendor id
    (the part of a provider id before its first ``-``).
    """

    _registry: ClassVar[dict[str, type["BalanceSource"]]] = {}

    name: ClassVar[str]
    display_name: ClassVar[str]
    endpoint: ClassVar[str]
    currency: ClassVar[str] = "USD"
    rate_limit: ClassVar[Optional[RateLimitSpec]] = None
    supports_balance: ClassVar[bool] = True
    # Returned instead of a lookup when supports_balance is False
    unsupported_reason: ClassVar[str] = ""
    extractors: ClassVar[tuple[Extractor, ...]] = ()

    def __init_subclass__(cls, **kwargs: object) -> None:
        super().__init_subclass__(**kwargs)
        if getattr(cls, "name", None):
            BalanceSource._registry[cls.name] = cls

    @classmethod
    def get_registry(cls) -> dict[str, type["BalanceSource"]]:
        return dict(cls._registry)

    @classmethod
    def find_source(cls, name: str) -> Optional["BalanceSource"]:
        source_cls = cls._registry.get(name)
        return source_cls() if source_cls else None

    @classmethod
    def get_source(cls, name: str) -> "BalanceSource":
        if name not in cls._registry:
            raise ValueError(f"Unknown balance source: {name}. Available: {list(cls._registry)}")
        return cls._registry[name]()

    @abstractmethod
    def build_headers(self, secret: str) -> dict[str, str]:
        ...

    def interpret_error(self, status_code: int, body: str) -> Optional[str]:
        """Vendor-specific message for a non-2xx reply, or None for the generic one."""
        return None

    def failure(self, error: str) -> BalanceResult:
        return BalanceResult.failure(error, currency=self.currency)

    def parse(self, payload: Any) -> BalanceResult:
        """Run extractors in order. Never raises."""
        try:
            for extract in self.extractors:
                found = extract(payload)
                if found is None:
                    continue
                balance, currency, details = found
                if balance >= 0:
                    return BalanceResult(
                        balance=balance,
                        currency=currency or self.currency,
                        last_updated=utc_now_iso(),
                        details=details,
                    )
        except (TypeError, ValueError, KeyError, AttributeError, IndexError, ArithmeticError) as exc:
            return self.failure(f"Failed to parse {self.display_name} balance response: {exc}")
        return self.failure(
            f"No balance information found in API response. Response: {json.dumps(payload, default=str)}"
        )


def discover_sources() -> None:
    """Import every source module in this package so its class registers."""
    package_dir = Path(__file__).parent
    for info in pkgutil.iter_modules([str(package_dir)]):
        if info.name.startswith("_"):
            continue
        importlib.import_module(f"tokerz.balances.{info.name}")
