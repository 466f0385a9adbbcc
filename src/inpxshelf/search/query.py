# ABOUTME: Parses free-text search queries with optional field qualifiers.
# ABOUTME: Compiles parsed terms into an FTS5 MATCH expression plus a LIKE fallback.

import re
from dataclasses import dataclass, field

from inpxshelf.search.tokenizer import tokenize, unique_tokens

# Columns of the books_fts table that unqualified terms are matched against.
FTS_SEARCHABLE_COLUMNS = ("title", "annotation", "authors", "series")

_FIELD_ALIASES = {
    "author": "authors",
    "authors": "authors",
    "автор": "authors",
    "авторы": "authors",
    "series": "series",
    "серия": "series",
    "серии": "series",
    "title": "title",
    "название": "title",
    "annotation": "annotation",
    "описание": "annotation",
    "description": "annotation",
}

_FIELD_RE = re.compile(
    r"\b(author|authors|автор|авторы|series|серия|серии|title|название"
    r"|annotation|описание|description)"
    r':("(?:[^"\\]|\\.)*"|\S+)',
    re.IGNORECASE,
)

_WHITESPACE_RE = re.compile(r"\s+")


@dataclass
class ParsedQuery:
    """A search query split into unqualified text and per-field token lists."""

    remainder: str = ""
    general_terms: list[str] = field(default_factory=list)
    title_terms: list[str] = field(default_factory=list)
    author_terms: list[str] = field(default_factory=list)
    series_terms: list[str] = field(default_factory=list)
    annotation_terms: list[str] = field(default_factory=list)

    def terms_for(self, column: str) -> list[str]:
        """Return the mutable token list for a normalized field name."""
        return {
            "title": self.title_terms,
            "authors": self.author_terms,
            "series": self.series_terms,
            "annotation": self.annotation_terms,
        }[column]


def normalize_field(name: str) -> str | None:
    """Map a qualifier (any case, English or Russian) to its FTS column."""
    return _FIELD_ALIASES.get(name.lower())


def unquote_value(raw: str) -> str:
    """Strip surrounding double quotes and resolve backslash escapes.

    A backslash escapes whatever follows it. A lone backslash at the very
    end is kept as-is. Values that are not fully quoted are returned trimmed.
    """
    trimmed = raw.strip()
    if len(trimmed) < 2 or trimmed[0] != '"' or trimmed[-1] != '"':
        return trimmed

    chars = []
    escaped = False
    for ch in trimmed[1:-1]:
        if escaped:
            chars.append(ch)
            escaped = False
        elif ch == "\\":
            escaped = True
        else:
            chars.append(ch)
    if escaped:
        chars.append("\\")
    return "".join(chars)


def parse_query(raw: str) -> ParsedQuery:
    """Extract ``field:value`` qualifiers and tokenize what is left.

    Recognized fields are removed from the remainder and their values are
    tokenized into the matching list. Everything else, including text that
    merely looks like a qualifier, stays in the remainder and feeds
    ``general_terms``.
    """
    result = ParsedQuery()
    if not raw or not raw.strip():
        return result

    pieces = []
    last = 0
    for match in _FIELD_RE.finditer(raw):
        column = normalize_field(match.group(1))
        pieces.append(raw[last:match.start()])
        last = match.end()
        if column is None:
            pieces.append(match.group(0))
            continue
        result.terms_for(column).extend(tokenize(unquote_value(match.group(2))))
    pieces.append(raw[last:])

    result.remainder = "".join(pieces)
    result.general_terms = tokenize(result.remainder)
    return result


def format_fts_token(token: str) -> str:
    """Turn a token into an FTS5 prefix query term."""
    if not token or token.endswith("*"):
        return token
    return token + "*"


def _general_clause(tokens: list[str]) -> str:
    per_token = []
    for token in unique_tokens(tokens):
        term = format_fts_token(token)
        columns = " OR ".join(f"{column}:{term}" for column in FTS_SEARCHABLE_COLUMNS)
        per_token.append(f"({columns})")
    return " AND ".join(per_token)


def _field_clause(column: str, tokens: list[str]) -> str:
    return " AND ".join(f"{column}:{format_fts_token(t)}" for t in unique_tokens(tokens))


def build_fts_expression(parsed: ParsedQuery) -> str:
    """Combine parsed terms into a single FTS5 MATCH expression.

    Every unqualified term must hit at least one searchable column; every
    qualified term must hit its own column. Returns "" when there are no terms.
    """
    clauses = [
        _general_clause(parsed.general_terms),
        _field_clause("title", parsed.title_terms),
        _field_clause("authors", parsed.author_terms),
        _field_clause("series", parsed.series_terms),
        _field_clause("annotation", parsed.annotation_terms),
    ]
    return " AND ".join(clause for clause in clauses if clause)


def normalize_whitespace(text: str) -> str:
    """Collapse whitespace runs to single spaces and trim the ends."""
    return _WHITESPACE_RE.sub(" ", text).strip()


def prepare_fts_search(raw: str) -> tuple[str, str]:
    """Compile a raw query into ``(fts_expression, fallback_text)``.

    The fallback is the cleaned-up remainder, or the unique general terms
    when the remainder is blank. Callers use it only if the expression is empty.
    """
    parsed = parse_query(raw)
    expression = build_fts_expression(parsed)

    fallback = normalize_whitespace(parsed.remainder)
    if not fallback and parsed.general_terms:
        fallback = " ".join(unique_tokens(parsed.general_terms))
    return expression, fallback
