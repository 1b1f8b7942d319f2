"""Compiled-in provider catalog with lookup, search and display helpers.

Profiles are immutable and defined once at import. Ids double as the
classifier's candidate ids, so every id named in the detection table must
exist here (tests enforce this).
"""

from __future__ import annotations

from typing import Optional

from tokerz.models import ProviderProfile

_PROFILES: tuple[ProviderProfile, ...] = (
    # OpenAI
    ProviderProfile(
        id="openai-gpt4o", display_name="GPT-4o", category="multimodal", company="OpenAI",
        key_format="sk-...", cost_per_unit=0.005, input_pricing=5.00, output_pricing=15.00,
        image_pricing=1.53, context_length=128_000,
        description="OpenAI's flagship multimodal model with vision, audio, and text capabilities",
        capabilities=("text", "vision", "audio", "function-calling"),
    ),
    ProviderProfile(
        id="openai-gpt41", display_name="GPT-4.1", category="reasoning", company="OpenAI",
        key_format="sk-...", cost_per_unit=0.002, input_pricing=2.00, output_pricing=8.00,
        context_length=1_048_576,
        description="Advanced instruction following with 1M context window for software engineering",
        capabilities=("long-context", "coding", "agents", "reasoning"),
    ),
    ProviderProfile(
        id="openai-gpt41-mini", display_name="GPT-4.1 Mini", category="text", company="OpenAI",
        key_format="sk-...", cost_per_unit=0.0004, input_pricing=0.40, output_pricing=1.60,
        context_length=1_048_576,
        description="Mid-sized model with GPT-4o performance at lower cost and latency",
        capabilities=("coding", "vision", "fast-inference"),
    ),
    ProviderProfile(
        id="openai-gpt41-nano", display_name="GPT-4.1 Nano", category="text", company="OpenAI",
        key_format="sk-...", cost_per_unit=0.0001, input_pricing=0.10, output_pricing=0.40,
        context_length=1_048_576,
        description="Fastest and cheapest in GPT-4.1 series with 1M context",
        capabilities=("classification", "autocompletion", "fast-inference"),
    ),
    ProviderProfile(
        id="openai-o3", display_name="o3", category="reasoning", company="OpenAI",
        key_format="sk-...", cost_per_unit=0.002, input_pricing=2.00, output_pricing=8.00,
        image_pricing=1.53, context_length=200_000,
        description="Advanced reasoning model for math, science, coding, and visual tasks",
        capabilities=("reasoning", "math", "science", "coding", "vision"),
    ),
    ProviderProfile(
        id="openai-o4-mini", display_name="o4 Mini", category="reasoning", company="OpenAI",
        key_format="sk-...", cost_per_unit=0.0011, input_pricing=1.10, output_pricing=4.40,
        image_pricing=0.842, context_length=200_000,
        description="Compact reasoning model optimized for speed and cost efficiency",
        capabilities=("reasoning", "coding", "multimodal", "tools"),
    ),
    ProviderProfile(
        id="openai-o4-mini-high", display_name="o4 Mini High", category="reasoning",
        company="OpenAI", key_format="sk-...", cost_per_unit=0.0011, input_pricing=1.10,
        output_pricing=4.40, image_pricing=0.842, context_length=200_000,
        description="o4-mini with reasoning_effort set to high for complex tasks",
        capabilities=("deep-reasoning", "coding", "multimodal", "tools"),
    ),
    # Anthropic
    ProviderProfile(
        id="claude-3-5-sonnet", display_name="Claude 3.5 Sonnet", category="text",
        company="Anthropic", key_format="sk-ant-...", cost_per_unit=0.003,
        input_pricing=3.00, output_pricing=15.00, context_length=200_000,
        description="Anthropic's most capable model for complex reasoning and analysis",
        capabilities=("reasoning", "analysis", "writing", "coding"),
    ),
    ProviderProfile(
        id="claude-3-haiku", display_name="Claude 3 Haiku", category="text",
        company="Anthropic", key_format="sk-ant-...", cost_per_unit=0.00025,
        input_pricing=0.25, output_pricing=1.25, context_length=200_000,
        description="Fast and efficient Claude model for quick tasks",
        capabilities=("fast-inference", "text-processing", "analysis"),
    ),
    # Google
    ProviderProfile(
        id="gemini-2-flash-exp", display_name="Gemini 2.0 Flash Experimental",
        category="multimodal", company="Google", key_format="AIza...", cost_per_unit=0.0015,
        input_pricing=0.00, output_pricing=0.00, context_length=1_048_576,
        description="Google's experimental multimodal model with advanced capabilities",
        capabilities=("multimodal", "vision", "audio", "reasoning"),
    ),
    ProviderProfile(
        id="gemini-1-5-pro", display_name="Gemini 1.5 Pro", category="multimodal",
        company="Google", key_format="AIza...", cost_per_unit=0.00125, input_pricing=1.25,
        output_pricing=5.00, context_length=2_097_152,
        description="Production-ready Gemini with 2M context window",
        capabilities=("long-context", "multimodal", "reasoning"),
    ),
    # DeepSeek
    ProviderProfile(
        id="deepseek-r1", display_name="DeepSeek R1", category="reasoning", company="DeepSeek",
        key_format="sk-...", has_wallet_balance=True, cost_per_unit=0.0014,
        input_pricing=0.14, output_pricing=0.28, context_length=164_000,
        description="Advanced reasoning model with thinking capabilities",
        capabilities=("reasoning", "thinking", "math", "coding"),
    ),
    ProviderProfile(
        id="deepseek-v3", display_name="DeepSeek V3", category="text", company="DeepSeek",
        key_format="sk-...", has_wallet_balance=True, cost_per_unit=0.0014,
        input_pricing=0.14, output_pricing=0.28, context_length=164_000,
        description="Latest DeepSeek model with improved efficiency",
        capabilities=("coding", "reasoning", "efficiency"),
    ),
    ProviderProfile(
        id="tng-deepseek-r1t-chimera", display_name="DeepSeek R1T Chimera",
        category="reasoning", company="TNG Technology", key_format="tng-...",
        cost_per_unit=0.00025, input_pricing=0.25, output_pricing=1.00, context_length=164_000,
        description="Merged model combining R1 reasoning with V3 efficiency",
        capabilities=("reasoning", "efficiency", "general-purpose"),
    ),
    ProviderProfile(
        id="microsoft-mai-ds-r1", display_name="MAI DS R1", category="reasoning",
        company="Microsoft", key_format="ms-...", cost_per_unit=0.00025, input_pricing=0.25,
        output_pricing=1.00, context_length=164_000,
        description="Microsoft's enhanced DeepSeek R1 with improved safety",
        capabilities=("reasoning", "safety", "multilingual"),
    ),
    # THUDM / Z.ai
    ProviderProfile(
        id="thudm-glm-z1-32b", display_name="GLM Z1 32B", category="reasoning",
        company="Tsinghua University", key_format="glm-...", has_wallet_balance=True,
        cost_per_unit=0.00004, input_pricing=0.04, output_pricing=0.14, context_length=33_000,
        description="Enhanced reasoning variant optimized for math and code",
        capabilities=("math", "reasoning", "coding", "tools"),
    ),
    ProviderProfile(
        id="thudm-glm-4-plus", display_name="GLM-4 Plus", category="text",
        company="Tsinghua University", key_format="glm-...", has_wallet_balance=True,
        cost_per_unit=0.00005, input_pricing=0.05, output_pricing=0.15, context_length=128_000,
        description="Advanced GLM model with enhanced capabilities",
        capabilities=("text-generation", "reasoning", "multilingual"),
    ),
    ProviderProfile(
        id="thudm-glm-4-5", display_name="GLM-4.5", category="text",
        company="Tsinghua University", key_format="glm-...", has_wallet_balance=True,
        cost_per_unit=0.00003, input_pricing=0.03, output_pricing=0.12, context_length=128_000,
        description="Latest GLM model with improved performance and efficiency",
        capabilities=("text-generation", "reasoning", "coding", "multilingual"),
    ),
    ProviderProfile(
        id="zai-glm-4-5", display_name="Z.ai GLM-4.5", category="text", company="Z.ai",
        key_format="zai-...", has_wallet_balance=True, cost_per_unit=0.00003,
        input_pricing=0.03, output_pricing=0.12, context_length=128_000,
        description="Z.ai's GLM-4.5 model with enhanced features",
        capabilities=("text-generation", "reasoning", "coding", "multilingual"),
    ),
    # Other text models
    ProviderProfile(
        id="qwen-qwen3-235b-a22b", display_name="Qwen3 235B A22B", category="reasoning",
        company="Alibaba", key_format="qwen-...", cost_per_unit=0.00018, input_pricing=0.18,
        output_pricing=0.54, context_length=131_000,
        description="235B parameter MoE model with thinking/non-thinking modes",
        capabilities=("reasoning", "multilingual", "tools", "thinking"),
    ),
    ProviderProfile(
        id="shisa-v2-llama-33-70b", display_name="Shisa V2 Llama 3.3 70B",
        category="translation", company="Shisa AI", key_format="shisa-...",
        cost_per_unit=0.00004, input_pricing=0.04, output_pricing=0.14, context_length=128_000,
        description="Bilingual Japanese-English chat model",
        capabilities=("bilingual", "translation", "chat", "instruction-following"),
    ),
    # Image generation
    ProviderProfile(
        id="ideogram-v2", display_name="Ideogram V2", category="image", company="Ideogram",
        key_format="ideo_...", usage_metric="images", usage_unit="images", cost_per_unit=0.08,
        description="Advanced AI image generation with text integration",
        capabilities=("image-generation", "text-in-images", "style-control"),
    ),
    ProviderProfile(
        id="midjourney-v6", display_name="Midjourney V6", category="image",
        company="Midjourney", key_format="mj-...", usage_metric="images", usage_unit="images",
        cost_per_unit=0.10, description="Artistic AI image generation with superior quality",
        capabilities=("artistic-generation", "style-control", "high-quality"),
    ),
    ProviderProfile(
        id="dall-e-3", display_name="DALL-E 3", category="image", company="OpenAI",
        key_format="sk-...", usage_metric="images", usage_unit="images", cost_per_unit=0.040,
        description="OpenAI's advanced image generation model",
        capabilities=("image-generation", "text-understanding", "safety"),
    ),
    ProviderProfile(
        id="stable-diffusion-3", display_name="Stable Diffusion 3", category="image",
        company="Stability AI", key_format="sd-...", usage_metric="images",
        usage_unit="images", cost_per_unit=0.035,
        description="Open-source image generation with commercial licensing",
        capabilities=("open-source", "customizable", "commercial-use"),
    ),
    # Audio
    ProviderProfile(
        id="elevenlabs-v2", display_name="ElevenLabs V2", category="audio",
        company="ElevenLabs", key_format="32 hex characters", usage_metric="characters",
        usage_unit="characters", has_wallet_balance=True, cost_per_unit=0.00003,
        description="Advanced AI voice synthesis and speech generation",
        capabilities=("voice-synthesis", "voice-cloning", "multilingual"),
    ),
    ProviderProfile(
        id="openai-whisper", display_name="Whisper", category="audio", company="OpenAI",
        key_format="sk-...", usage_metric="audio_seconds", usage_unit="seconds",
        cost_per_unit=0.006, description="OpenAI's speech-to-text transcription model",
        capabilities=("speech-to-text", "multilingual", "translation"),
    ),
    # Code
    ProviderProfile(
        id="github-copilot", display_name="GitHub Copilot", category="code", company="GitHub",
        key_format="ghp_...", usage_metric="requests", usage_unit="suggestions",
        cost_per_unit=0.02, description="AI pair programmer for code completion and generation",
        capabilities=("code-completion", "code-generation", "multi-language"),
    ),
    ProviderProfile(
        id="cursor-ai", display_name="Cursor", category="code", company="Anysphere",
        key_format="cur-...", usage_metric="requests", usage_unit="requests",
        cost_per_unit=0.01, description="AI-powered code editor with advanced features",
        capabilities=("code-editing", "refactoring", "debugging"),
    ),
    ProviderProfile(
        id="codeium", display_name="Codeium", category="code", company="Codeium",
        key_format="codeium-...", usage_metric="requests", usage_unit="completions",
        cost_per_unit=0.00, description="Free AI code completion and chat",
        capabilities=("code-completion", "code-chat", "multi-language"),
    ),
    # Generic vendor entries, used when only the vendor can be told apart
    ProviderProfile(
        id="openai", display_name="OpenAI (Generic)", category="text", company="OpenAI",
        key_format="sk-...", generic=True, cost_per_unit=0.002,
        description="OpenAI API access for various models",
    ),
    ProviderProfile(
        id="claude", display_name="Claude (Generic)", category="text", company="Anthropic",
        key_format="sk-ant-...", generic=True, cost_per_unit=0.003,
        description="Anthropic Claude API access",
    ),
    ProviderProfile(
        id="gemini", display_name="Gemini (Generic)", category="multimodal", company="Google",
        key_format="AIza...", generic=True, cost_per_unit=0.0015,
        description="Google Gemini API access",
    ),
    ProviderProfile(
        id="deepseek", display_name="DeepSeek (Generic)", category="text", company="DeepSeek",
        key_format="sk-...", generic=True, has_wallet_balance=True, cost_per_unit=0.0014,
        description="DeepSeek API access for various models",
    ),
    ProviderProfile(
        id="thudm", display_name="THUDM (Generic)", category="text",
        company="Tsinghua University", key_format="glm-...", generic=True,
        has_wallet_balance=True, cost_per_unit=0.00004,
        description="THUDM GLM API access for various models",
    ),
    ProviderProfile(
        id="zai", display_name="Z.ai (Generic)", category="text", company="Z.ai",
        key_format="zai-...", generic=True, has_wallet_balance=True, cost_per_unit=0.00003,
        description="Z.ai API access for GLM models",
    ),
)

PROFILES: dict[str, ProviderProfile] = {p.id: p for p in _PROFILES}

DEFAULT_PROFILE_ID = "openai"


def find_profile(provider_id: str) -> Optional[ProviderProfile]:
    return PROFILES.get(provider_id)


def get_profile(provider_id: str) -> ProviderProfile:
    """Profile for `provider_id`, falling back to the generic OpenAI entry."""
    return PROFILES.get(provider_id) or PROFILES[DEFAULT_PROFILE_ID]


def is_generic(provider_id: str) -> bool:
    profile = PROFILES.get(provider_id)
    return bool(profile and profile.generic)


def all_profiles() -> list[ProviderProfile]:
    return list(_PROFILES)


def profiles_by_category(category: Optional[str] = None) -> list[ProviderProfile]:
    if not category or category == "all":
        return all_profiles()
    return [p for p in _PROFILES if p.category == category]


def profiles_by_company(company: str) -> list[ProviderProfile]:
    needle = company.lower()
    return [p for p in _PROFILES if needle in p.company.lower()]


def search_profiles(query: str) -> list[ProviderProfile]:
    """Case-insensitive substring search over names, company, category and capabilities."""
    if not query.strip():
        return all_profiles()
    term = query.lower()
    return [
        p for p in _PROFILES
        if term in p.display_name.lower()
        or term in p.description.lower()
        or term in p.company.lower()
        or term in p.category.lower()
        or any(term in cap.lower() for cap in p.capabilities)
    ]


def unique_categories() -> list[str]:
    return sorted({p.category for p in _PROFILES})


def unique_companies() -> list[str]:
    return sorted({p.company for p in _PROFILES})


def _compact(amount: float, unit: str) -> str:
    if amount >= 1_000_000:
        return f"{amount / 1_000_000:.1f}M {unit}"
    if amount >= 1_000:
        return f"{amount / 1_000:.1f}K {unit}"
    return f"{amount:g} {unit}"


def format_usage(amount: float, metric: str) -> str:
    if metric == "tokens":
        return _compact(amount, "tokens")
    if metric == "characters":
        return _compact(amount, "chars")
    if metric == "images":
        return f"{amount:g} {'image' if amount == 1 else 'images'}"
    if metric == "audio_seconds":
        if amount >= 3600:
            return f"{amount / 3600:.1f} hrs"
        if amount >= 60:
            return f"{amount / 60:.1f} min"
        return f"{amount:g}s"
    if metric == "requests":
        return f"{amount:g} {'request' if amount == 1 else 'requests'}"
    return f"{amount:g} {metric}"


def format_currency(amount: float) -> str:
    """USD with 2 to 6 fraction digits, e.g. $0.000125 or $12.50."""
    text = f"{abs(amount):,.6f}".rstrip("0")
    whole, _, frac = text.partition(".")
    frac = frac.ljust(2, "0")
    sign = "-" if amount < 0 else ""
    return f"{sign}${whole}.{frac}"


def format_pricing(pricing: float) -> str:
    if pricing == 0:
        return "Free"
    if pricing < 0.01:
        return f"${pricing * 1000:.2f}/K tokens"
    return f"${pricing:.2f}/M tokens"
