# ABOUTME: Splits free text into lowercase alphanumeric search tokens.
# ABOUTME: No stemming; punctuation and whitespace only separate tokens.

import re

# Letters and digits in any script; underscore is a word char for re but not for us.
_TOKEN_RE = re.compile(r"[^\W_]+")


def tokenize(text: str) -> list[str]:
    """Split text into lowercase runs of Unicode letters and digits.

    Every other character acts as a separator and is dropped. Tokens are
    returned in order of appearance, duplicates included.
    """
    if not text:
        return []
    tokens = []
    for match in _TOKEN_RE.finditer(text):
        # Some capitals lower to a letter plus a combining mark ("İ" -> "i\u0307")
        token = "".join(ch for ch in match.group(0).lower() if ch.isalnum())
        if token:
            tokens.append(token)
    return tokens


def unique_tokens(tokens: list[str]) -> list[str]:
    """Drop empty and repeated tokens, keeping first-seen order."""
    seen: set[str] = set()
    result = []
    for token in tokens:
        if not token or token in seen:
            continue
        seen.add(token)
        result.append(token)
    return result
