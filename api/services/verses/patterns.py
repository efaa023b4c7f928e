# api/services/verses/patterns.py
"""
Surface syntaxes for Bible references in running text.

- Link/embed markup: "[[John 3.16]]", "![[John 3.16#John 3.16|Jn 3:16]]"
- Numeric references: "John 3:16", "Rom 8:1, 3, 5", "Psalm 23", "Jude 3"
- Written references: "Ephesians chapter 5, verse 8", "Gen ch. 1 v. 3"
"""

import re

# Existing links and embeds, non-greedy so neighbouring links stay separate
LINK_PATTERN = re.compile(r"!?\[\[.*?\]\]")

# Book group starts on a word character so the span never takes the
# whitespace before it; a full stop after the verse is left in the text
WRITTEN_PATTERN = re.compile(
    r"\b((?:(?:[1-3]|I{1,3})\s?)?[A-Za-z][A-Za-z.]*(?:\s(?:of|the)\s[A-Za-z]+)?)"
    r"\s+(?:chapter|chap\.?|ch\.?)\s*(\d{1,3})"
    r"\s*,?\s*(?:verse|v\.?|vs\.?|v)\s*(\d{1,3})(?!\d)",
    re.IGNORECASE,
)

# Chapter/verse separators inside a numeric reference
VERSE_SEPARATOR = r"(?:[.:]|\s+(?:verse|v\.?|vs\.?)\s+)"
LIST_SEPARATOR = r"(?:-|–|—|and|&|,)"

NUMERAL_PREFIX = re.compile(r"^(?:[1-3]|I{1,3})$", re.IGNORECASE)


def compile_numeric_pattern(book_pattern: str) -> re.Pattern:
    """
    Compile the numeric reference pattern for a book alternation.

    Group 1 is the book as written, group 2 the chapter/verse locator.
    The match never ends just before more digits or a chapter/verse
    separator followed by a digit, so "John 3:1234" is not cut down to
    "John 3".
    """
    return re.compile(
        rf"\b({book_pattern})\.?\s*"
        rf"(\d{{1,3}}(?:{VERSE_SEPARATOR}\d{{1,3}})?"
        rf"(?:\s*{LIST_SEPARATOR}\s*\d{{1,3}})*)(?!\d|[.:]\d)",
        re.IGNORECASE,
    )
