# api/tests/test_detector.py
"""
Tests for detector.py - numeric and written-out references, link masking
and document order.
"""

import os
import sys

import pytest

# Add api directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from services.verses.detector import (
    DetectedReference,
    LinkRange,
    VerseDetector,
    find_link_ranges,
    resolve_overlaps,
)


def make_detector(resolve_overlapping: bool = True) -> VerseDetector:
    return VerseDetector(resolve_overlapping=resolve_overlapping)


def test_detects_simple_single_verse():
    text = "For God so loved the world (John 3:16) that he gave..."
    verses = make_detector().detect(text)

    assert len(verses) == 1
    assert verses[0].text == "John 3:16"
    assert verses[0].original_text == "John 3:16"
    assert verses[0].kind == "numeric"
    print("✓ detect: single verse")


def test_detects_multiple_verses():
    text = "See Romans 8:1 and also Romans 8:28."
    verses = make_detector().detect(text)

    assert [v.text for v in verses] == ["Romans 8:1", "Romans 8:28"]


def test_detects_lists_of_verses():
    text = "Read Romans 8:1, 3, 5 for comfort."
    verses = make_detector().detect(text)

    assert len(verses) == 1
    assert verses[0].text == "Romans 8:1, 3, 5"


def test_detects_verse_ranges():
    text = "Genesis 1:1-3 is the beginning."
    verses = make_detector().detect(text)

    assert len(verses) == 1
    assert verses[0].text == "Genesis 1:1-3"
    assert (verses[0].start, verses[0].end) == (0, len("Genesis 1:1-3"))


def test_detects_numbered_books():
    text = "1 Corinthians 13:4 is about love. 2 John 1:6 is also good."
    verses = make_detector().detect(text)

    assert [v.text for v in verses] == ["1 Corinthians 13:4", "2 John 1:6"]


def test_detects_abbreviations_and_chapters():
    text = "Compare Rom. 8:28 with Ps 23 and II Kings 2:11."
    verses = make_detector().detect(text)

    assert [v.text for v in verses] == ["Rom 8:28", "Ps 23", "II Kings 2:11"]
    assert verses[0].original_text == "Rom. 8:28"


def test_detects_written_out_verses_and_normalizes_them():
    text = "Paul says in Ephesians chapter 5, verse 8 to walk as children of light."
    verses = make_detector().detect(text)

    assert len(verses) == 1
    assert verses[0].text == "Ephesians 5.8"
    assert "Ephesians chapter 5, verse 8" in verses[0].original_text
    assert verses[0].kind == "written"
    print("✓ detect: written-out verse normalized")


def test_ignores_text_inside_existing_links():
    text = "Comparison: John 3:16 vs [[John 3:16]]."
    verses = make_detector().detect(text)

    assert len(verses) == 1
    assert verses[0].start == text.index("John")


def test_ignores_text_inside_embeds():
    text = "![[John 3.16#John 3.16|John 3:16]] and [[Romans 8.1|Rom 8:1]]"
    assert make_detector().detect(text) == []


def test_offsets_index_into_document():
    text = "Morning: Psalm 5:3. Evening: Ps 4:8, then Jude 24-25."
    verses = make_detector().detect(text)

    assert len(verses) == 3
    for v in verses:
        assert text[v.start:v.end] == v.original_text
    assert [v.start for v in verses] == sorted(v.start for v in verses)


def test_numeric_and_written_interleave_in_document_order():
    text = "First Gen ch. 1 v. 3, then John 1:1, then Exodus chapter 20, verse 3."
    verses = make_detector().detect(text)

    assert [v.kind for v in verses] == ["written", "numeric", "written"]
    assert [v.text for v in verses] == ["Gen 1.3", "John 1:1", "Exodus 20.3"]


def test_no_references():
    assert make_detector().detect("Nothing to see here, 3:16 alone is not a verse.") == []
    assert make_detector().detect("") == []


def test_none_document_fails_fast():
    with pytest.raises(TypeError):
        make_detector().detect(None)


def test_find_link_ranges_is_non_greedy():
    text = "[[a]] x ![[b]]"
    assert find_link_ranges(text) == [LinkRange(0, 5), LinkRange(8, 14)]


def test_resolve_overlaps_keeps_longest():
    short = DetectedReference("John 3", "John 3", 10, 16)
    long = DetectedReference("John 3.16", "John chapter 3, verse 16", 4, 28, "written")
    other = DetectedReference("Rom 8:1", "Rom 8:1", 40, 47)

    assert resolve_overlaps([long, short, other]) == [long, other]
    assert resolve_overlaps([short, other]) == [short, other]


def test_overlap_resolution_can_be_disabled():
    text = "John 3:16 and 1 John chapter 3, verse 16"
    keep_all = make_detector(resolve_overlapping=False).detect(text)
    resolved = make_detector().detect(text)

    assert len(resolved) <= len(keep_all)
    for a in resolved:
        assert not any(a is not b and a.overlaps(b) for b in resolved)


def test_written_reference_span_starts_at_book():
    for text, original in [
        ("in Ephesians chapter 5, verse 8 walk", "Ephesians chapter 5, verse 8"),
        ("In Exodus chapter 3 v. 14", "Exodus chapter 3 v. 14"),
        ("Read 1 John chapter 3, verse 16. Then pray.", "1 John chapter 3, verse 16"),
    ]:
        verses = make_detector().detect(text)

        assert len(verses) == 1
        ref = verses[0]
        assert ref.kind == "written"
        assert ref.original_text == original
        assert ref.start == text.index(original)
        assert text[ref.start:ref.end] == ref.original_text
        assert not ref.original_text[0].isspace()
        assert not ref.original_text.endswith(".")


def test_numeric_reference_is_not_cut_short():
    assert make_detector().detect("John 3:1234") == []
    assert make_detector().detect("John 1234") == []
    verses = make_detector().detect("John 3:16. Then John 4.")
    assert [v.text for v in verses] == ["John 3:16", "John 4"]
