"""Classify AI-provider API keys and look up their wallet balances."""

from tokerz.aggregator import BalanceAggregator, supported_balance_providers, supports_balance
from tokerz.detection import classify, explain, validate_format
from tokerz.models import BalanceEntry, BalanceResult, DetectionResult, FormatCheck

__version__ = "0.1.0"

__all__ = [
    "BalanceAggregator",
    "BalanceEntry",
    "BalanceResult",
    "DetectionResult",
    "FormatCheck",
    "classify",
    "explain",
    "supported_balance_providers",
    "supports_balance",
    "validate_format",
]
