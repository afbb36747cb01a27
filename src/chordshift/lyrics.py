"""Tokenizer for inline chord notation.

Turns ``"[Am]Hello [G]world"`` into::

    [LyricToken("Am", "Hello "), LyricToken("G", "world")]

The tokenizer never changes the text: joining the token texts gives back the
lyric with its chord markers removed.
"""

import re

from .models import LyricToken, ParsedLine, Section
from .notes import is_section_label

# A [marker] group regardless of content; captured so re.split keeps it.
CHORD_MARKER_RE = re.compile(r"(\[[^\]]+\])")

_WHOLE_BRACKET_RE = re.compile(r"^\[([^\]]+)\]$")


def parse_lyrics_line(line: str) -> ParsedLine:
    """Split one line of inline lyrics into ``(chord, text)`` tokens.

    A marker followed directly by another marker (or the end of the line)
    still produces a token, with empty text, so the chord can be drawn
    floating over the gap.
    """
    tokens: list[LyricToken] = []
    pending: str | None = None
    has_chords = False

    for segment in CHORD_MARKER_RE.split(line):
        if CHORD_MARKER_RE.fullmatch(segment):
            if pending is not None:
                tokens.append(LyricToken(pending, ""))
            pending = segment[1:-1]
            has_chords = True
            continue
        if pending is not None:
            tokens.append(LyricToken(pending, segment))
            pending = None
        elif segment:
            tokens.append(LyricToken("", segment))

    if pending is not None:
        tokens.append(LyricToken(pending, ""))

    return ParsedLine(tokens=tokens, has_chords=has_chords)


def parse_lyrics(text: str) -> list[ParsedLine]:
    return [parse_lyrics_line(line) for line in text.split("\n")]


def is_section_marker(line: str) -> bool:
    """True for a line holding only a section marker such as ``[Verse 1]``."""
    m = _WHOLE_BRACKET_RE.match(line.strip())
    return bool(m) and is_section_label(m.group(1))


def split_sections(text: str) -> list[Section]:
    """Group a lyrics blob into sections at its section-marker lines.

    Blank lines only separate passages and are dropped; lines before the first
    marker form an unlabelled section.  Sections left without any lines are
    dropped as well.
    """
    sections: list[Section] = []
    current = Section(label=None)

    for line in text.split("\n"):
        if not line.strip():
            continue
        if is_section_marker(line):
            if current.lines:
                sections.append(current)
            current = Section(label=line.strip()[1:-1].strip())
            continue
        current.lines.append(line.rstrip())

    if current.lines:
        sections.append(current)

    return sections
