"""Key classifier: infer which vendor issued a raw API key.

Two tables drive classification:

- DETECTION_PATTERNS: ordered full-string regexes, each naming candidate
  profile ids and a base confidence. Longer / more specific prefixes come
  first (``sk-ant-`` before the generic ``sk-`` shapes).
- DISAMBIGUATION_RULES: hand-tuned confidence nudges for prefixes shared by
  several vendors, applied after pattern matching.

Both are plain data so each can be tested on its own. Classification is
deterministic and does no I/O; it never raises.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Optional

from tokerz.catalog import find_profile, is_generic
from tokerz.models import DetectionResult, FormatCheck

# Generic vendor entries are preferred less than specific models matched by the same pattern
GENERIC_PENALTY = 0.8

MAX_SUGGESTIONS = 3

_OPENAI_IDS = (
    "openai-gpt4o", "openai-gpt41", "openai-gpt41-mini", "openai-gpt41-nano",
    "openai-o3", "openai-o4-mini", "openai-o4-mini-high", "dall-e-3",
    "openai-whisper", "openai",
)
_DEEPSEEK_IDS = ("deepseek-r1", "deepseek-v3", "deepseek")


@dataclass(frozen=True)
class DetectionPattern:
    regex: re.Pattern
    providers: tuple[str, ...]
    confidence: float


def _pattern(regex: str, providers: tuple[str, ...], confidence: float) -> DetectionPattern:
    return DetectionPattern(re.compile(regex), providers, confidence)


DETECTION_PATTERNS: tuple[DetectionPattern, ...] = (
    _pattern(r"sk-ant-[A-Za-z0-9_-]{20,}", ("claude-3-5-sonnet", "claude-3-haiku", "claude"), 0.98),
    # DeepSeek shapes are checked before OpenAI's overlapping sk- shape
    _pattern(r"sk-[a-f0-9]{32}", _DEEPSEEK_IDS, 0.96),
    _pattern(r"sk-[a-f0-9]{48}", _DEEPSEEK_IDS, 0.95),
    _pattern(r"sk-[A-Za-z0-9]{32,64}", _DEEPSEEK_IDS, 0.85),
    _pattern(r"sk-(?!ant)[A-Za-z0-9]{20,47}", _OPENAI_IDS, 0.92),
    _pattern(r"AIza[A-Za-z0-9_-]{35,}", ("gemini-2-flash-exp", "gemini-1-5-pro", "gemini"), 0.95),
    _pattern(
        r"glm-[A-Za-z0-9]{20,}",
        ("thudm-glm-z1-32b", "thudm-glm-4-plus", "thudm-glm-4-5", "thudm"),
        0.98,
    ),
    _pattern(r"zai-[A-Za-z0-9]{20,}", ("zai-glm-4-5", "zai"), 0.98),
    _pattern(r"tng-[A-Za-z0-9]{20,}", ("tng-deepseek-r1t-chimera",), 0.98),
    _pattern(r"ms-[A-Za-z0-9]{20,}", ("microsoft-mai-ds-r1",), 0.98),
    _pattern(r"qwen-[A-Za-z0-9]{20,}", ("qwen-qwen3-235b-a22b",), 0.98),
    _pattern(r"shisa-[A-Za-z0-9]{20,}", ("shisa-v2-llama-33-70b",), 0.98),
    _pattern(r"ideo_[A-Za-z0-9]{20,}", ("ideogram-v2",), 0.98),
    _pattern(r"mj-[A-Za-z0-9]{20,}", ("midjourney-v6",), 0.98),
    _pattern(r"sd-[A-Za-z0-9]{20,}", ("stable-diffusion-3",), 0.98),
    _pattern(r"ghp_[A-Za-z0-9]{36}", ("github-copilot",), 0.98),
    _pattern(r"cur-[A-Za-z0-9]{20,}", ("cursor-ai",), 0.98),
    _pattern(r"codeium-[A-Za-z0-9]{20,}", ("codeium",), 0.98),
    # Bare 32-char hex; weak signal, many vendors issue keys like this
    _pattern(r"[a-f0-9]{32}", ("elevenlabs-v2",), 0.70),
)


@dataclass(frozen=True)
class Nudge:
    """Shift confidence of every candidate whose id contains `family`.

    Positive deltas are capped at `bound`, negative ones floored at it.
    """

    family: str
    delta: float
    bound: float

    def apply(self, confidence: float) -> float:
        if self.delta >= 0:
            return min(self.bound, confidence + self.delta)
        return max(self.bound, confidence + self.delta)


@dataclass(frozen=True)
class DisambiguationRule:
    description: str
    prefix: str
    condition: Callable[[str], bool]
    nudges: tuple[Nudge, ...]


_HEX48 = re.compile(r"sk-[a-f0-9]{48}")
_SK_ALNUM = re.compile(r"sk-[A-Za-z0-9]{20,}")

# Within one prefix only the first rule whose condition holds is applied
DISAMBIGUATION_RULES: tuple[DisambiguationRule, ...] = (
    DisambiguationRule(
        description="48 hex chars after sk- is DeepSeek's long key shape",
        prefix="sk-",
        condition=lambda key: _HEX48.fullmatch(key) is not None,
        nudges=(Nudge("deepseek", +0.2, 0.95), Nudge("openai", -0.3, 0.3)),
    ),
    DisambiguationRule(
        description="mixed-case alphanumeric sk- keys lean OpenAI",
        prefix="sk-",
        condition=lambda key: _SK_ALNUM.fullmatch(key) is not None
        and any(c.isupper() for c in key),
        nudges=(Nudge("openai", +0.1, 0.95),),
    ),
)


@dataclass
class _Candidate:
    provider: str
    confidence: float
    pattern: str


def _match_patterns(key: str) -> list[_Candidate]:
    candidates: list[_Candidate] = []
    for entry in DETECTION_PATTERNS:
        if entry.regex.fullmatch(key) is None:
            continue
        for provider in entry.providers:
            confidence = entry.confidence * GENERIC_PENALTY if is_generic(provider) else entry.confidence
            candidates.append(_Candidate(provider, confidence, entry.regex.pattern))
    return candidates


def _disambiguate(key: str, candidates: list[_Candidate]) -> None:
    done: set[str] = set()
    for rule in DISAMBIGUATION_RULES:
        if rule.prefix in done or not key.startswith(rule.prefix):
            continue
        if not rule.condition(key):
            continue
        done.add(rule.prefix)
        for cand in candidates:
            for nudge in rule.nudges:
                if nudge.family in cand.provider:
                    cand.confidence = nudge.apply(cand.confidence)
                    break


def _rank(cand: _Candidate) -> tuple[float, int, str]:
    return (-cand.confidence, 1 if is_generic(cand.provider) else 0, cand.provider)


def classify(raw_key: str) -> DetectionResult:
    """Best guess at the issuing provider, with up to three distinct suggestions."""
    if not raw_key or not isinstance(raw_key, str):
        return DetectionResult.unknown()
    key = raw_key.strip()
    candidates = _match_patterns(key)
    if not candidates:
        return DetectionResult.unknown()
    _disambiguate(key, candidates)
    candidates.sort(key=_rank)

    suggestions: list[str] = []
    for cand in candidates:
        if cand.provider not in suggestions:
            suggestions.append(cand.provider)
        if len(suggestions) == MAX_SUGGESTIONS:
            break

    best = candidates[0]
    return DetectionResult(
        provider=best.provider,
        confidence=max(0.0, min(1.0, best.confidence)),
        matched_pattern=best.pattern,
        suggestions=tuple(suggestions),
    )


def explain(result: DetectionResult) -> str:
    if not result.provider:
        return "Could not determine provider from API key format. Please verify the key is correct."
    profile = find_profile(result.provider)
    if profile is None:
        return "Detected an unknown provider."
    if result.confidence >= 0.9:
        level = "High confidence"
    elif result.confidence >= 0.7:
        level = "Medium confidence"
    else:
        level = "Low confidence"
    return f'{level}: Detected {profile.display_name} ({profile.company}) based on key format "{profile.key_format}"'


MIN_KEY_LENGTH = 10
MAX_KEY_LENGTH = 200

PLACEHOLDERS: tuple[str, ...] = ("your-api-key", "api-key-here", "enter-key", "placeholder", "example")

_FILLER = re.compile(r"\.{3,}|\*{3,}")


def validate_format(raw_key: Optional[str]) -> FormatCheck:
    """Syntactic gate run before classification or any network use."""
    if not raw_key or not isinstance(raw_key, str):
        return FormatCheck(False, "API key is required")
    key = raw_key.strip()
    if len(key) < MIN_KEY_LENGTH:
        return FormatCheck(False, "API key appears too short")
    if len(key) > MAX_KEY_LENGTH:
        return FormatCheck(False, "API key appears too long")
    lowered = key.lower()
    if any(p in lowered for p in PLACEHOLDERS):
        return FormatCheck(False, "Please enter your actual API key")
    if _FILLER.fullmatch(key):
        return FormatCheck(False, "Please enter your actual API key, not placeholder text")
    return FormatCheck(True)
