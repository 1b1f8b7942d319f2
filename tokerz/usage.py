"""Cost estimation for simulated usage analytics.

Pricing comes from the provider catalog: token prices are USD per million
tokens, image prices USD per image, other metrics use cost_per_unit.
"""

from __future__ import annotations

from tokerz.catalog import get_profile
from tokerz.models import UsageCalculation, UsageEvent

_PER_MILLION = 1_000_000


def calculate_usage_cost(provider_id: str, usage: UsageEvent) -> UsageCalculation:
    """Estimate cost of `usage` under the pricing of `provider_id`.

    Unknown provider ids are priced as the generic OpenAI profile.
    """
    profile = get_profile(provider_id)
    metric = profile.usage_metric
    amount: float = 0
    cost = 0.0
    breakdown: dict[str, float] = {}

    if metric == "tokens":
        if usage.input_tokens and usage.output_tokens and profile.input_pricing and profile.output_pricing:
            input_cost = usage.input_tokens / _PER_MILLION * profile.input_pricing
            output_cost = usage.output_tokens / _PER_MILLION * profile.output_pricing
            amount = usage.input_tokens + usage.output_tokens
            cost = input_cost + output_cost
            breakdown = {"input_cost": input_cost, "output_cost": output_cost}
        elif usage.total_tokens and profile.cost_per_unit:
            amount = usage.total_tokens
            rate = profile.input_pricing or profile.cost_per_unit * _PER_MILLION
            cost = amount / _PER_MILLION * rate
    elif metric == "characters":
        if usage.characters and profile.cost_per_unit:
            amount = usage.characters
            cost = amount * profile.cost_per_unit
    elif metric == "images":
        price = profile.image_pricing or profile.cost_per_unit
        if usage.images and price:
            amount = usage.images
            cost = amount * price
    elif metric == "audio_seconds":
        # priced per minute
        if usage.audio_seconds and profile.cost_per_unit:
            amount = usage.audio_seconds
            cost = amount / 60 * profile.cost_per_unit
    elif metric == "requests":
        if usage.requests and profile.cost_per_unit:
            amount = usage.requests
            cost = amount * profile.cost_per_unit

    return UsageCalculation(amount=amount, unit=metric, cost_usd=max(0.0, cost), breakdown=breakdown)
