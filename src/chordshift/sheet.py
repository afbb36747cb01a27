"""Conversion between chord-over-lyrics sheets and inline chord notation.

Chord-over-lyrics (what people type into the editor)::

    Am       G        C
    Amazing  grace    how sweet

Inline (what gets stored)::

    [Am]Amazing  [G]grace    [C]how sweet

Pipeline, sheet -> inline:

  1. is_chord_line()            - does a line hold (mostly) chords?
  2. chord_positions()          - (chord, column) pairs from a chord line
  3. merge_chord_lyric_lines()  - splice the chords into the lyric below
  4. to_inline()                - whole-text walk pairing chord and lyric lines

and inline -> sheet through to_chord_sheet(), a left-to-right fold over the
tokens of each line that builds a chord buffer and a lyric buffer side by side.
"""

import logging
import re

from .lyrics import is_section_marker, parse_lyrics_line
from .models import ChordPosition, ParsedLine
from .notes import is_chord, is_section_label

logger = logging.getLogger(__name__)

# Share of whitespace-separated tokens that must be chords for a chord line.
CHORD_LINE_THRESHOLD = 0.6

_TOKEN_RE = re.compile(r"\S+")


# ---------------------------------------------------------------------------
# Line classification
# ---------------------------------------------------------------------------


def is_chord_line(line: str) -> bool:
    """True when at least 60% of the line's tokens are chords.

    The slack lets through a trailing ``x2`` or ``(riff)`` while plain lyrics,
    even ones containing a stray ``A``, stay lyrics.
    """
    tokens = line.split()
    if not tokens:
        return False
    chords = sum(1 for token in tokens if is_chord(token))
    return chords / len(tokens) >= CHORD_LINE_THRESHOLD


# ---------------------------------------------------------------------------
# Chord extraction
# ---------------------------------------------------------------------------


def chord_positions(line: str) -> list[ChordPosition]:
    """Return the chords on *line* with the column each one starts at.

    Tokens that are not chords are skipped.  The result is sorted left to right.
    """
    positions = [
        ChordPosition(chord=m.group(), column=m.start())
        for m in _TOKEN_RE.finditer(line)
        if is_chord(m.group())
    ]
    return sorted(positions, key=lambda p: p.column)


# ---------------------------------------------------------------------------
# Merge algorithm
# ---------------------------------------------------------------------------


def merge_chord_lyric_lines(chord_line: str, lyric_line: str) -> str:
    """Merge a chord line and the lyric line below it into one inline line.

    Each chord lands in front of the lyric character in its column.  Columns
    past the end of the lyric are clamped to its end; when two chords end up
    at the same spot they are kept apart by a single space.

    Example::

        chord_line = "  D                     G"
        lyric_line = "I pulled into Nazareth, was feelin'"
        result     = "I [D]pulled into Nazareth, [G]was feelin'"
    """
    positions = chord_positions(chord_line)
    if not positions:
        return lyric_line

    parts: list[str] = []
    last = 0
    for i, position in enumerate(positions):
        column = min(position.column, len(lyric_line))
        if column > last:
            parts.append(lyric_line[last:column])
        elif i > 0:
            parts.append(" ")
        parts.append(f"[{position.chord}]")
        last = column

    parts.append(lyric_line[last:])
    return "".join(parts)


# ---------------------------------------------------------------------------
# Sheet -> inline
# ---------------------------------------------------------------------------


def _stands_alone(line: str) -> bool:
    """True when to_inline() never merges a chord line above *line* into it."""
    return not line.strip() or is_chord_line(line) or is_section_marker(line)


def to_inline(text: str) -> str:
    """Convert chord-over-lyrics text to inline chord notation.

    * A chord line directly above a lyric line is merged into it.
    * A chord line above a blank line, another chord line, a section marker
      or the end of the text becomes ``[D] [G] [A]``.
    * Blank lines come out empty; every other line passes through untouched,
      so text that is already inline survives a second conversion.
    """
    lines = text.split("\n")
    result: list[str] = []

    i = 0
    while i < len(lines):
        line = lines[i]

        if not line.strip():
            result.append("")
            i += 1
            continue

        if is_chord_line(line):
            below = lines[i + 1] if i + 1 < len(lines) else None
            if below is not None and not _stands_alone(below):
                logger.debug("line %d: chords merged into line %d", i, i + 1)
                result.append(merge_chord_lyric_lines(line, below))
                i += 2
            else:
                logger.debug("line %d: standalone chord line", i)
                result.append(" ".join(f"[{p.chord}]" for p in chord_positions(line)))
                i += 1
            continue

        result.append(line)
        i += 1

    return "\n".join(result)


# ---------------------------------------------------------------------------
# Inline -> sheet
# ---------------------------------------------------------------------------


def _layout(parsed: ParsedLine) -> tuple[str, str]:
    """Lay one tokenized line out as a (chord line, lyric line) pair."""
    chords = ""
    lyric = ""
    for token in parsed.tokens:
        if token.chord and is_section_label(token.chord):
            lyric += f"[{token.chord}]"
        elif token.chord:
            if chords and len(chords) >= len(lyric):
                # Previous label overruns this column: push the lyric along so
                # the chord still starts over its own text.
                lyric = lyric.ljust(len(chords) + 1)
            chords = chords.ljust(len(lyric)) + token.chord
        lyric += token.text
    return chords, lyric


def _layout_line(line: str) -> tuple[str | None, str]:
    """(chord line, lyric line) for one inline line.

    The chord line is ``None`` when the line is kept as it is: no chords, or
    chords that to_inline() would not read back as a chord line.  The lyric
    is ``""`` for a chord-only line.
    """
    parsed = parse_lyrics_line(line)
    if not parsed.has_chords:
        return None, line
    chords, lyric = _layout(parsed)
    if not is_chord_line(chords):
        return None, line
    return chords, lyric if lyric.strip() else ""


def to_chord_sheet(text: str) -> str:
    """Convert inline chord notation to chord-over-lyrics text.

    Lines without chords (plain lyrics, section markers, blank lines) are
    emitted unchanged.  A chord-only line such as ``[D] [G]`` becomes a bare
    chord line when what follows stands on its own (a blank line, a chord
    line, a section marker or the end of the text).  Above a lyric line it
    stays inline, otherwise to_inline() would merge it into that lyric.
    """
    lines = text.split("\n")
    laid_out = [_layout_line(line) for line in lines]
    result: list[str] = []

    for i, (line, (chords, lyric)) in enumerate(zip(lines, laid_out)):
        if chords is None:
            result.append(line)
        elif lyric:
            result.extend([chords, lyric])
        else:
            below = None
            if i + 1 < len(lines):
                below_chords, below_lyric = laid_out[i + 1]
                below = below_chords if below_chords is not None else below_lyric
            if below is None or _stands_alone(below):
                result.append(chords)
            else:
                logger.debug("line %d: chord-only line kept inline above lyrics", i)
                result.append(line)

    return "\n".join(result)
