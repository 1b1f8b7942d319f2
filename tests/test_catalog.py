"""Tests for the provider catalog, display formatting and cost estimation."""

import pytest

from tokerz.catalog import (
    PROFILES,
    all_profiles,
    find_profile,
    format_currency,
    format_pricing,
    format_usage,
    get_profile,
    is_generic,
    profiles_by_category,
    profiles_by_company,
    search_profiles,
    unique_categories,
    unique_companies,
)
from tokerz.models import CATEGORIES, USAGE_METRICS, UsageEvent
from tokerz.usage import calculate_usage_cost


class TestProfiles:
    def test_ids_unique(self):
        ids = [p.id for p in all_profiles()]
        assert len(ids) == len(set(ids)) == len(PROFILES)

    def test_fields_within_enumerations(self):
        for p in all_profiles():
            assert p.category in CATEGORIES
            assert p.usage_metric in USAGE_METRICS

    def test_generic_entries(self):
        generic = {p.id for p in all_profiles() if p.generic}
        assert generic == {"openai", "claude", "gemini", "deepseek", "thudm", "zai"}
        assert is_generic("openai")
        assert not is_generic("openai-gpt4o")
        assert not is_generic("unknown-thing")

    def test_get_profile_falls_back_to_openai(self):
        assert get_profile("no-such-provider").id == "openai"
        assert find_profile("no-such-provider") is None

    def test_frozen(self):
        p = get_profile("deepseek-r1")
        with pytest.raises(AttributeError):
            p.display_name = "x"  # type: ignore[misc]

    def test_to_dict_order(self):
        keys = list(get_profile("claude").to_dict())
        assert keys[:5] == ["id", "display_name", "category", "company", "key_format"]


class TestFiltering:
    def test_by_category(self):
        images = profiles_by_category("image")
        assert {p.id for p in images} == {"ideogram-v2", "midjourney-v6", "dall-e-3", "stable-diffusion-3"}

    @pytest.mark.parametrize("category", [None, "", "all"])
    def test_by_category_all(self, category):
        assert len(profiles_by_category(category)) == len(PROFILES)

    def test_by_company_substring_case_insensitive(self):
        assert {p.id for p in profiles_by_company("tsinghua")} == {
            "thudm-glm-z1-32b", "thudm-glm-4-plus", "thudm-glm-4-5", "thudm",
        }

    def test_search_matches_capabilities(self):
        ids = {p.id for p in search_profiles("voice-cloning")}
        assert ids == {"elevenlabs-v2"}

    def test_search_blank_returns_all(self):
        assert len(search_profiles("   ")) == len(PROFILES)

    def test_unique_lists_sorted(self):
        cats = unique_categories()
        assert cats == sorted(cats)
        assert "reasoning" in cats
        assert unique_companies() == sorted(unique_companies())


class TestFormatting:
    @pytest.mark.parametrize("amount,metric,expected", [
        (500, "tokens", "500 tokens"),
        (1500, "tokens", "1.5K tokens"),
        (2_500_000, "tokens", "2.5M tokens"),
        (12_000, "characters", "12.0K chars"),
        (1, "images", "1 image"),
        (3, "images", "3 images"),
        (45, "audio_seconds", "45s"),
        (90, "audio_seconds", "1.5 min"),
        (7200, "audio_seconds", "2.0 hrs"),
        (1, "requests", "1 request"),
        (4, "widgets", "4 widgets"),
    ])
    def test_format_usage(self, amount, metric, expected):
        assert format_usage(amount, metric) == expected

    @pytest.mark.parametrize("amount,expected", [
        (0, "$0.00"),
        (12.5, "$12.50"),
        (0.000125, "$0.000125"),
        (1234.5, "$1,234.50"),
        (-3, "-$3.00"),
    ])
    def test_format_currency(self, amount, expected):
        assert format_currency(amount) == expected

    @pytest.mark.parametrize("pricing,expected", [
        (0, "Free"),
        (0.004, "$4.00/K tokens"),
        (2.5, "$2.50/M tokens"),
    ])
    def test_format_pricing(self, pricing, expected):
        assert format_pricing(pricing) == expected


class TestUsageCost:
    def test_split_token_pricing(self):
        calc = calculate_usage_cost("deepseek-r1", UsageEvent(input_tokens=1_000_000, output_tokens=500_000))
        assert calc.unit == "tokens"
        assert calc.amount == 1_500_000
        assert calc.cost_usd == pytest.approx(0.14 + 0.14)
        assert calc.breakdown["input_cost"] == pytest.approx(0.14)
        assert calc.breakdown["output_cost"] == pytest.approx(0.14)

    def test_total_tokens_uses_input_price(self):
        calc = calculate_usage_cost("openai-gpt4o", UsageEvent(total_tokens=2_000_000))
        assert calc.cost_usd == pytest.approx(10.0)
        assert calc.breakdown == {}

    def test_total_tokens_without_input_price_uses_unit_cost(self):
        calc = calculate_usage_cost("claude", UsageEvent(total_tokens=1000))
        assert calc.cost_usd == pytest.approx(3.0)

    def test_characters(self):
        calc = calculate_usage_cost("elevenlabs-v2", UsageEvent(characters=10_000))
        assert calc.unit == "characters"
        assert calc.cost_usd == pytest.approx(0.3)

    def test_images_prefer_image_pricing_then_unit_cost(self):
        assert calculate_usage_cost("midjourney-v6", UsageEvent(images=3)).cost_usd == pytest.approx(0.30)

    def test_audio_priced_per_minute(self):
        calc = calculate_usage_cost("openai-whisper", UsageEvent(audio_seconds=120))
        assert calc.cost_usd == pytest.approx(0.012)

    def test_requests(self):
        assert calculate_usage_cost("cursor-ai", UsageEvent(requests=10)).cost_usd == pytest.approx(0.1)

    def test_free_provider_costs_nothing(self):
        calc = calculate_usage_cost("codeium", UsageEvent(requests=100))
        assert calc.cost_usd == 0
        assert calc.amount == 0

    def test_missing_figures_cost_zero(self):
        calc = calculate_usage_cost("deepseek-r1", UsageEvent())
        assert calc.cost_usd == 0
        assert calc.amount == 0

    def test_unknown_provider_priced_as_generic_openai(self):
        calc = calculate_usage_cost("mystery", UsageEvent(total_tokens=1000))
        assert calc.unit == "tokens"
        assert calc.cost_usd == pytest.approx(2.0)
