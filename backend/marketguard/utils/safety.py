from __future__ import annotations
import re
from typing import NamedTuple, Tuple


class PatternSet(NamedTuple):
    """A named, versioned list of detection patterns.

    Patterns are kept as data so coverage can be reviewed and extended
    without touching the matching code. Bump ``version`` on every change.
    """

    name: str
    version: str
    patterns: Tuple[Tuple[str, str], ...]

    def compile(self) -> Tuple[Tuple[str, re.Pattern], ...]:
        return tuple(
            (label, re.compile(pattern, re.IGNORECASE | re.MULTILINE))
            for label, pattern in self.patterns
        )


# --- 1) Prompt-injection heuristics for listing text, messages and searches ---
PROMPT_INJECTION_PATTERNS = PatternSet(
    name="prompt_injection",
    version="3",
    patterns=(
        (
            "instruction_override",
            r"\b(ignore|disregard|forget)\s+(all\s+)?(the\s+)?(previous|above|prior|all)\s+(instructions?|prompts?|rules)\b",
        ),
        ("system_prefix", r"^\s*system\s*:"),
        ("settings_override", r"\boverride\s+(the\s+|your\s+)?(settings|instructions|rules)\b"),
        ("roleplay", r"\brole[\s-]?play\s+as\b"),
        ("act_as_privileged", r"\bact\s+as\s+(an?\s+|the\s+)?(admin|administrator|moderator|developer|system|root)\b"),
        ("pretend", r"\bpretend\s+(you\s+are|you're|to\s+be)\b"),
        ("rules_disregard", r"\bdisregard\s+(your|the)\s+(rules|guidelines|policy)\b"),
        ("you_are_now", r"\byou\s+are\s+now\s+(an?|the|in)\b"),
        ("model_tokens", r"\[(SYSTEM|INST)\]|\[/INST\]|<\|im_(start|end)\|>"),
    ),
)

# --- 2) SQL metacharacters next to SQL keywords in search input ---
SQL_INJECTION_PATTERNS = PatternSet(
    name="sql_injection",
    version="2",
    patterns=(
        ("quoted_keyword", r"['\"`]\s*(\)\s*)?(or|and|union|select|insert|update|delete|drop|exec)\b"),
        ("tautology", r"\b(or|and)\s+['\"]?\w+['\"]?\s*=\s*['\"]?\w+['\"]?"),
        ("stacked_statement", r";\s*(select|insert|update|delete|drop|alter|create|truncate|exec)\b"),
        ("union_select", r"\bunion\s+(all\s+)?select\b"),
        ("comment", r"--|/\*|\*/"),
        ("sleep_call", r"\b(sleep|benchmark|pg_sleep)\s*\(|\bwaitfor\s+delay\b"),
    ),
)

COMPILED_PATTERNS = {
    PROMPT_INJECTION_PATTERNS: PROMPT_INJECTION_PATTERNS.compile(),
    SQL_INJECTION_PATTERNS: SQL_INJECTION_PATTERNS.compile(),
}


def looks_like_injection(
    text: str, patterns: PatternSet = PROMPT_INJECTION_PATTERNS
) -> Tuple[bool, str]:
    """
    Check text against a pattern set.
    Returns (is_flagged, name_of_first_matching_pattern).
    """
    if not text:
        return False, ""

    compiled = COMPILED_PATTERNS.get(patterns)
    if compiled is None:
        compiled = patterns.compile()

    for label, pattern in compiled:
        if pattern.search(text):
            return True, label
    return False, ""


def detect_prompt_injection(text: str) -> bool:
    flagged, _ = looks_like_injection(text, PROMPT_INJECTION_PATTERNS)
    return flagged


def detect_sql_injection(text: str) -> bool:
    flagged, _ = looks_like_injection(text, SQL_INJECTION_PATTERNS)
    return flagged
