"""Lexical import scanning for Solidity sources.

Only import directives are recognized; everything else in the file is
ignored. Directives that do not match one of the accepted forms (including a
missing terminating semicolon) are skipped rather than reported.
"""

from __future__ import annotations

import re

_STRING = r"(?:\"[^\"\n]*\"|'[^'\n]*')"

_IMPORT_DIRECTIVE = re.compile(
    r"\bimport\s+(?:"
    rf"(?P<direct>{_STRING})(?:\s+as\s+\w+)?"
    r"|"
    rf"(?:\*\s*as\s+\w+|\{{[^{{}}]*\}}|\w+)\s+from\s+(?P<source>{_STRING})"
    r")\s*;"
)


def strip_comments(text: str) -> str:
    """Blank out ``//`` and ``/* */`` comments, leaving string literals intact.

    Newlines inside block comments are kept so offsets stay line-stable.
    An unterminated block comment swallows the rest of the text.
    """
    out: list[str] = []
    i = 0
    length = len(text)
    quote: str | None = None

    while i < length:
        char = text[i]
        if quote is not None:
            out.append(char)
            if char == "\\" and i + 1 < length:
                out.append(text[i + 1])
                i += 2
                continue
            if char == quote or char == "\n":
                quote = None
            i += 1
            continue

        if char in {'"', "'"}:
            quote = char
            out.append(char)
            i += 1
            continue

        if text.startswith("//", i):
            end = text.find("\n", i)
            i = length if end == -1 else end
            continue

        if text.startswith("/*", i):
            end = text.find("*/", i + 2)
            stop = length if end == -1 else end + 2
            out.append("\n" * text.count("\n", i, stop))
            i = stop
            continue

        out.append(char)
        i += 1

    return "".join(out)


_KEEP_AFTER = re.compile(r"\b(?:import|from)\s*\Z")


def mask_strings(text: str) -> str:
    """Blank the body of every string literal that is not an import path.

    A literal is kept when it directly follows ``import`` or ``from``.
    Quotes and newlines are preserved.
    """
    out: list[str] = []
    i = 0
    length = len(text)

    while i < length:
        quote = text[i]
        if quote not in {'"', "'"}:
            out.append(quote)
            i += 1
            continue

        end = i + 1
        while end < length and text[end] not in {quote, "\n"}:
            end += 2 if text[end] == "\\" else 1
        end = min(end + 1, length)

        literal = text[i:end]
        if len(literal) < 2 or _KEEP_AFTER.search(text[max(0, i - 32) : i]):
            out.append(literal)
        else:
            out.append(
                quote + "".join(c if c == "\n" else " " for c in literal[1:-1]) + literal[-1:]
            )
        i = end

    return "".join(out)


class SolidityImportScanner:
    """Extract the unresolved path of every ``import`` directive."""

    language = "solidity"

    def scan(self, text: str) -> frozenset[str]:
        references: set[str] = set()
        for match in _IMPORT_DIRECTIVE.finditer(mask_strings(strip_comments(text))):
            quoted = match.group("direct") or match.group("source")
            path = quoted[1:-1].strip()
            if path:
                references.add(path)
        return frozenset(references)


__all__ = ["SolidityImportScanner", "mask_strings", "strip_comments"]
