# api/services/verses/renderer.py
"""
Link and embed rendering.

Default output, byte-exact:
- link:  [[John 3.16|John 3:16]]
- embed: ![[John 3.16#John 3.16|John 3:16]]

Lists and ranges render one item per reference: links joined by ", ",
embeds one per line. Anything that does not expand to a reference is
returned unchanged.
"""

import re
from typing import Optional, Sequence

from .config_loader import VerseFormatterSettings, load_settings
from .normalizer import CanonicalReference, ReferenceNormalizer, get_normalizer

LINK_SEPARATOR = ", "
EMBED_SEPARATOR = "\n"

# Range mode is used for text holding a dash or a list separator
RANGE_MARKERS = re.compile(r"[-–—,&]|\band\b", re.IGNORECASE)


# "{chapter}.{verse}" style joints collapse for whole-chapter references
CHAPTER_VERSE_JOINT = re.compile(r"\{chapter\}[^{}\w]*\{verse\}")


def _alias_for(refs: Sequence[CanonicalReference], ref: CanonicalReference, alias: Optional[str]) -> str:
    if alias and len(refs) == 1:
        return alias
    return ref.target


def apply_template(template: str, ref: CanonicalReference, original: str) -> str:
    """
    Substitute {book}, {chapter}, {verse} and {original} in a template.

    For a whole-chapter reference the separator between {chapter} and
    {verse} is dropped along with the verse, so the default template
    gives "[[Psalms 23]]" rather than "[[Psalms 23.]]".
    """
    if ref.verse is None:
        template = CHAPTER_VERSE_JOINT.sub("{chapter}", template)
    return (
        template
        .replace("{book}", ref.book)
        .replace("{chapter}", ref.chapter)
        .replace("{verse}", ref.verse or "")
        .replace("{original}", original)
    )


def render_link(
    refs: Sequence[CanonicalReference],
    alias: Optional[str] = None,
    settings: Optional[VerseFormatterSettings] = None,
) -> str:
    """
    Render references as [[target|alias]] links.

    Args:
        refs: Canonical references in expansion order
        alias: Display text, used when a single reference is rendered
        settings: Custom template settings (defaults from config)

    With a custom template, {original} is the caller's original text for
    every rendered reference, falling back to each reference's target
    when no original was given.

    Returns:
        Comma-separated links, or "" when refs is empty
    """
    settings = settings or load_settings()
    links = []
    for ref in refs:
        if settings.use_custom_template:
            links.append(apply_template(settings.template, ref, alias or ref.target))
        else:
            links.append(f"[[{ref.target}|{_alias_for(refs, ref, alias)}]]")
    return LINK_SEPARATOR.join(links)


def render_embed(refs: Sequence[CanonicalReference], alias: Optional[str] = None) -> str:
    """Render references as ![[target#target|alias]] embeds, one per line."""
    return EMBED_SEPARATOR.join(
        f"![[{ref.target}#{ref.target}|{_alias_for(refs, ref, alias)}]]"
        for ref in refs
    )


def _expand(text: str, normalizer: Optional[ReferenceNormalizer]):
    return (normalizer or get_normalizer()).expand(text)


def link_single_verse(
    text: str,
    settings: Optional[VerseFormatterSettings] = None,
    original: Optional[str] = None,
    normalizer: Optional[ReferenceNormalizer] = None,
) -> str:
    """Link one verse; text that is not exactly one reference is returned as is."""
    refs = _expand(text, normalizer)
    if len(refs) != 1:
        return text
    return render_link(refs, original, settings)


def embed_single_verse(
    text: str,
    settings: Optional[VerseFormatterSettings] = None,
    original: Optional[str] = None,
    normalizer: Optional[ReferenceNormalizer] = None,
) -> str:
    """Embed one verse under its own heading."""
    refs = _expand(text, normalizer)
    if len(refs) != 1:
        return text
    return render_embed(refs, original)


def link_verse_range(
    text: str,
    settings: Optional[VerseFormatterSettings] = None,
    original: Optional[str] = None,
    normalizer: Optional[ReferenceNormalizer] = None,
) -> str:
    """Link every verse of a list or range."""
    refs = _expand(text, normalizer)
    if not refs:
        return text
    return render_link(refs, original, settings)


def embed_verse_range(
    text: str,
    settings: Optional[VerseFormatterSettings] = None,
    original: Optional[str] = None,
    normalizer: Optional[ReferenceNormalizer] = None,
) -> str:
    """Embed every verse of a list or range, one per line."""
    refs = _expand(text, normalizer)
    if not refs:
        return text
    return render_embed(refs, original)


def is_range(text: str) -> bool:
    return bool(RANGE_MARKERS.search(text))


def format_reference(
    text: str,
    embed: bool = False,
    settings: Optional[VerseFormatterSettings] = None,
    original: Optional[str] = None,
    normalizer: Optional[ReferenceNormalizer] = None,
) -> str:
    """
    Link or embed a reference, picking single or range mode from its shape.
    """
    if is_range(text):
        render = embed_verse_range if embed else link_verse_range
    else:
        render = embed_single_verse if embed else link_single_verse
    return render(text, settings, original, normalizer)
