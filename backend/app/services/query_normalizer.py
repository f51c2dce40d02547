"""
Query preprocessing for Wine Labs matching.

Cleans OCR'd wine names so cosmetic variants ("Ch. Margaux", "CH MARGAUX",
"• Château Margaux $") reach the identity service in one canonical form.
"""

import re

# Applied in order. Every replacement produces text the earlier patterns no
# longer match, which keeps normalize_query idempotent.
_QUOTE_PATTERNS = (
    (re.compile(r"[‘’‚‛`´]"), "'"),
    (re.compile(r"[“”„‟]"), '"'),
)

# Standalone OCR digit/letter confusions
_OCR_PATTERNS = (
    (re.compile(r"(?<!\S)0(?!\S)"), "O"),
    (re.compile(r"(?<!\S)[lL](?!\S)"), "I"),
)

# Wine-trade abbreviations (whole word, optional trailing period)
_ABBREVIATIONS = (
    (re.compile(r"\bCh\b\.?", re.IGNORECASE), "Château"),
    (re.compile(r"\bDom\b\.?", re.IGNORECASE), "Domaine"),
    (re.compile(r"\bSt\b\.?", re.IGNORECASE), "Saint"),
)

_NOISE = re.compile(r"[$€£¥•·]")
_WHITESPACE = re.compile(r"\s+")


def _expander(expansion: str):
    """Build a re.sub callback that keeps "Ch.Margaux" from fusing into one word."""
    def _expand(match: re.Match) -> str:
        following = match.string[match.end():match.end() + 1]
        if match.group(0).endswith(".") and following.isalnum():
            return expansion + " "
        return expansion
    return _expand


def normalize_query(raw: str) -> str:
    """
    Normalize a raw OCR wine name into a canonical query string.

    Never raises; returns "" for empty or non-string input.
    """
    if not isinstance(raw, str):
        return ""

    cleaned = raw.strip()
    if not cleaned:
        return ""

    for pattern, replacement in _QUOTE_PATTERNS:
        cleaned = pattern.sub(replacement, cleaned)

    # Noise goes before token-level fixes so "$ 0" style fragments settle
    # in a single pass
    cleaned = _NOISE.sub(" ", cleaned)
    cleaned = _WHITESPACE.sub(" ", cleaned).strip()

    for pattern, expansion in _ABBREVIATIONS:
        cleaned = pattern.sub(_expander(expansion), cleaned)

    # Expansions can split "Dom.0" into standalone tokens; fix those after
    cleaned = _WHITESPACE.sub(" ", cleaned).strip()
    for pattern, replacement in _OCR_PATTERNS:
        cleaned = pattern.sub(replacement, cleaned)

    return cleaned
