"""Chord transposition.

All functions are pure string transforms.  Shifting by 0 semitones always
returns the input unchanged, and shifting by ``s1`` then ``s2`` gives the same
result as shifting by ``s1 + s2`` once (for a fixed sharp/flat choice).

Spelling: pass ``use_flats=True/False`` to force flats or sharps.  Left as
``None``, each chord keeps the accidental style of its own root, so ``Bb``
moves to ``C``/``Db``/``Eb`` while ``F#`` moves to ``G``/``G#``/``A#``.
"""

import logging
import re

from .keys import detect_key
from .notes import (
    FLAT_NOTES,
    NOT_FOUND,
    SHARP_NOTES,
    is_chord,
    is_flat_spelling,
    is_section_label,
    key_name,
    key_to_semitone,
    note_index,
    parse_root,
    prefers_flats,
    semitone_diff,
)
from .sheet import is_chord_line

logger = logging.getLogger(__name__)

# Any [token] group regardless of content
ANY_BRACKET_RE = re.compile(r"\[([^\]]+)\]")

_TOKEN_RE = re.compile(r"\S+")


# ---------------------------------------------------------------------------
# Single notes and chords
# ---------------------------------------------------------------------------


def transpose_note(note: str, semitones: int, use_flats: bool) -> str:
    """Move a note name by *semitones*; unknown names come back unchanged."""
    idx = note_index(note)
    if idx == NOT_FOUND:
        return note
    # Python's % is already non-negative for a positive modulus.
    new_idx = (idx + semitones) % 12
    return FLAT_NOTES[new_idx] if use_flats else SHARP_NOTES[new_idx]


def transpose_chord(chord: str, semitones: int, use_flats: bool | None = None) -> str:
    """Transpose one chord token such as ``Am``, ``C#maj7`` or ``G/B``.

    The suffix is kept verbatim.  In a slash chord the bass note moves by the
    same amount with the same spelling; a bass that is not a note is left as
    it is while the root still moves.  Tokens without a root pass through.
    """
    if semitones == 0:
        return chord
    parsed = parse_root(chord)
    if parsed is None:
        return chord

    flat = use_flats if use_flats is not None else is_flat_spelling(parsed.root)
    new_root = transpose_note(parsed.root, semitones, flat)

    if parsed.rest.startswith("/"):
        bass = parse_root(parsed.rest[1:])
        if bass is not None:
            new_bass = transpose_note(bass.root, semitones, flat)
            return f"{new_root}/{new_bass}{bass.rest}"

    return new_root + parsed.rest


# ---------------------------------------------------------------------------
# Whole texts
# ---------------------------------------------------------------------------


def transpose_lyrics(text: str, semitones: int, use_flats: bool | None = None) -> str:
    """Transpose every ``[Chord]`` marker in inline lyrics.

    Section markers (``[Verse 1]``, ``[Chorus]``, ``[Bridge]``) are left alone.
    """
    if semitones == 0:
        return text

    def _replace(m: re.Match) -> str:
        content = m.group(1)
        if is_section_label(content):
            return m.group()
        return f"[{transpose_chord(content, semitones, use_flats)}]"

    return ANY_BRACKET_RE.sub(_replace, text)


def _transpose_chord_line(line: str, semitones: int, use_flats: bool | None) -> str:
    """Transpose a chord line, keeping every chord in its column where possible."""
    out = ""
    for m in _TOKEN_RE.finditer(line):
        token = m.group()
        if is_chord(token):
            token = transpose_chord(token, semitones, use_flats)
        else:
            token = transpose_lyrics(token, semitones, use_flats)
        if out and len(out) >= m.start():
            out += " "
        else:
            out = out.ljust(m.start())
        out += token
    return out


def transpose_sheet(text: str, semitones: int, use_flats: bool | None = None) -> str:
    """Transpose chord-over-lyrics text (chord lines and any inline markers)."""
    if semitones == 0:
        return text
    lines = []
    for line in text.split("\n"):
        if is_chord_line(line):
            lines.append(_transpose_chord_line(line, semitones, use_flats))
        else:
            lines.append(transpose_lyrics(line, semitones, use_flats))
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Keys
# ---------------------------------------------------------------------------


def spelling_for_key(key: str) -> bool:
    """Whether chords in *key* should be written with flats.

    An explicit accidental decides (``Bb`` -> flats, ``A#`` -> sharps);
    natural keys follow convention, so only F uses flats.
    """
    if is_flat_spelling(key):
        return True
    if "#" in key:
        return False
    return prefers_flats(key_to_semitone(key))


def semitones_to_key(text: str, target_key: str, from_key: str | None = None) -> int:
    """Upward shift (0-11) that moves *text* from its key to *target_key*."""
    source = from_key if from_key is not None else detect_key(text)
    return semitone_diff(source, target_key)


def transpose_to_key(
    text: str,
    target_key: str,
    from_key: str | None = None,
    use_flats: bool | None = None,
) -> str:
    """Transpose inline lyrics into *target_key*.

    *from_key* defaults to the key detected from the lyrics.
    """
    semitones = semitones_to_key(text, target_key, from_key)
    if use_flats is None:
        use_flats = spelling_for_key(target_key)
    logger.debug("transposing to %s: %+d semitones, flats=%s", target_key, semitones, use_flats)
    return transpose_lyrics(text, semitones, use_flats)


def shifted_key(key: str, semitones: int, use_flats: bool | None = None) -> str:
    """Name of the key reached by moving *key* up *semitones*.

    Without an explicit *use_flats*, the conventional spelling of the new key
    is used (``C`` + 3 -> ``Eb``, ``C`` + 6 -> ``F#``).
    """
    semitone = (key_to_semitone(key) + semitones) % 12
    flats = use_flats if use_flats is not None else prefers_flats(semitone)
    return key_name(semitone, flats)
