"""Note and chord model.

Everything here is table-driven: two chromatic spellings indexed by semitone,
a list of chord-suffix words, and a small recursive-descent parser for the
chord grammar::

    Chord  := Root Suffix* ("/" Root)?
    Root   := "A".."G" ("#" | "b")?
    Suffix := m | maj | min | dim | aug | sus | add | 6 | 7 | 9 | 11 | 13 | 2 | 4

Root matching is greedy: the two-character spellings (``C#``, ``Db``) are tried
before the natural notes, otherwise ``C#m`` would split into ``C`` + ``#m``.

Bracketed section markers (``[Verse 1]``, ``[Chorus]``) share the ``[...]``
syntax with chords; :func:`is_section_label` tells them apart.
"""

import re
from typing import NamedTuple

from .exceptions import UnknownKeyError
from .models import Chord

# ---------------------------------------------------------------------------
# Tables
# ---------------------------------------------------------------------------

SHARP_NOTES = ("C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B")
FLAT_NOTES = ("C", "Db", "D", "Eb", "E", "F", "Gb", "G", "Ab", "A", "Bb", "B")

NOT_FOUND = -1

# Longest words first so "maj" wins over "m" and "11" over a lone digit.
SUFFIX_WORDS = ("maj", "min", "dim", "aug", "sus", "add", "11", "13", "m", "6", "7", "9", "2", "4")

# Letter-only words that may follow a root in a loosely spelled chord (Dmi7, CM7).
_CHORD_LETTER_WORDS = ("maj", "min", "dim", "aug", "sus", "add", "mi", "m", "M")

# Keys conventionally written with flats: Db, Eb, F, Ab, Bb.
FLAT_KEY_SEMITONES = frozenset({1, 3, 5, 8, 10})

# Section names that can never be chords, even when they start with A-G.
SECTION_KEYWORDS_RE = re.compile(
    r"^(?:Verse|Chorus|Bridge|Intro|Outro|Solo|Interlude|Instrumental|"
    r"Pre-?Chorus|Tag|Coda|Refrain|Hook|Break|Ending|End)\b",
    re.IGNORECASE,
)

_LEADING_LETTERS_RE = re.compile(r"^[A-Za-z]+")


class RootSplit(NamedTuple):
    """A token split after its root note: "C#m7" -> ("C#", "m7")."""

    root: str
    rest: str


class DisplayKey(NamedTuple):
    """One of the twelve key buttons shown by the song viewer."""

    label: str  # e.g. "C#/Db"
    sharps_label: str
    flats_label: str
    semitones: int


DISPLAY_KEYS = tuple(
    DisplayKey(
        label=sharp if sharp == flat else f"{sharp}/{flat}",
        sharps_label=sharp,
        flats_label=flat,
        semitones=i,
    )
    for i, (sharp, flat) in enumerate(zip(SHARP_NOTES, FLAT_NOTES))
)


# ---------------------------------------------------------------------------
# Notes
# ---------------------------------------------------------------------------


def note_index(note: str) -> int:
    """Return the semitone (0-11) of a spelled note, or ``NOT_FOUND``.

    Exact, case-sensitive lookup in the sharp table, then the flat table.
    """
    if note in SHARP_NOTES:
        return SHARP_NOTES.index(note)
    if note in FLAT_NOTES:
        return FLAT_NOTES.index(note)
    return NOT_FOUND


def is_flat_spelling(note: str) -> bool:
    """True when *note* is spelled with a flat (``Bb``), never for ``B`` itself."""
    return len(note) > 1 and note[1] == "b"


def normalize_root(note: str) -> str:
    """Collapse a flat spelling to its sharp equivalent (``Db`` -> ``C#``)."""
    idx = note_index(note)
    if idx == NOT_FOUND:
        return note
    return SHARP_NOTES[idx]


def same_pitch(a: str, b: str) -> bool:
    """True when two note names are the same pitch class (``C#`` and ``Db``)."""
    idx = note_index(a)
    return idx != NOT_FOUND and idx == note_index(b)


# ---------------------------------------------------------------------------
# Chord parsing
# ---------------------------------------------------------------------------


def parse_root(token: str) -> RootSplit | None:
    """Split the leading root note off *token*.

    Returns ``None`` for an empty token or one that does not start with a note.
    """
    if not token:
        return None
    two = token[:2]
    if two in SHARP_NOTES or two in FLAT_NOTES:
        return RootSplit(two, token[2:])
    one = token[:1]
    if one in SHARP_NOTES:
        return RootSplit(one, token[1:])
    return None


def _consume_suffix(text: str, words: tuple[str, ...] = SUFFIX_WORDS) -> tuple[str, str]:
    """Eat suffix words off the front of *text*; return (suffix, remainder)."""
    consumed = []
    while text:
        for word in words:
            if text.startswith(word):
                consumed.append(word)
                text = text[len(word):]
                break
        else:
            break
    return "".join(consumed), text


def parse_chord(token: str) -> Chord | None:
    """Parse a chord token against the strict grammar, or return ``None``."""
    head = parse_root(token)
    if head is None:
        return None
    suffix, rest = _consume_suffix(head.rest)
    if not rest:
        return Chord(root=head.root, suffix=suffix)
    if not rest.startswith("/"):
        return None
    bass = parse_root(rest[1:])
    if bass is None or bass.rest:
        return None
    return Chord(root=head.root, suffix=suffix, bass=bass.root)


def is_chord(token: str) -> bool:
    return parse_chord(token.strip()) is not None


def normalize_chord(chord: str) -> str:
    """Respell the root with sharps, keeping the rest verbatim (``Bbm7`` -> ``A#m7``)."""
    head = parse_root(chord)
    if head is None:
        return chord
    return normalize_root(head.root) + head.rest


def is_section_label(content: str) -> bool:
    """True when bracket *content* names a song section rather than a chord.

    Loose chord spellings outside the strict grammar (``Cm7b5``, ``G7(b9)``)
    still count as chords so that they transpose.
    """
    content = content.strip()
    if not content or is_chord(content):
        return False
    if SECTION_KEYWORDS_RE.match(content):
        return True
    head = parse_root(content)
    if head is None or any(ch.isspace() for ch in content):
        return True
    # "Bridge" parses as B + "ridge", "Amen" as A + "m" + "en": a chord's
    # letters are suffix words all the way through.
    m = _LEADING_LETTERS_RE.match(head.rest)
    return bool(m) and bool(_consume_suffix(m.group(), _CHORD_LETTER_WORDS)[1])


# ---------------------------------------------------------------------------
# Keys
# ---------------------------------------------------------------------------


def key_to_semitone(key: str) -> int:
    """Semitone of a key label; unknown labels count as C (0)."""
    idx = note_index(key)
    return 0 if idx == NOT_FOUND else idx


def semitone_diff(from_key: str, to_key: str) -> int:
    """Upward distance in semitones (0-11) from one key to another.

    Returns 0 when either label is not a note.
    """
    a = note_index(from_key)
    b = note_index(to_key)
    if a == NOT_FOUND or b == NOT_FOUND:
        return 0
    return (b - a) % 12


def prefers_flats(semitone: int) -> bool:
    return semitone % 12 in FLAT_KEY_SEMITONES


def key_name(semitone: int, use_flats: bool = False) -> str:
    table = FLAT_NOTES if use_flats else SHARP_NOTES
    return table[semitone % 12]


def require_key(label: str) -> str:
    """Validate a user-supplied key label and return it in canonical case.

    ``"bb"`` -> ``"Bb"``, ``"f#"`` -> ``"F#"``.

    Raises :class:`~chordshift.exceptions.UnknownKeyError` for anything that is
    not a note name.
    """
    candidate = label.strip()
    candidate = candidate[:1].upper() + candidate[1:]
    if note_index(candidate) == NOT_FOUND:
        raise UnknownKeyError(label)
    return candidate
