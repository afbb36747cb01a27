"""Key detection from chord content.

Each of the twelve major keys has a six-chord diatonic vocabulary
(I ii iii IV V vi).  A song is scored against every vocabulary:

+------------------------------------------+---------------------------------+
| Rule                                     | Points                          |
+==========================================+=================================+
| chord, or its root, is in the vocabulary | +1 per chord                    |
+------------------------------------------+---------------------------------+
| first chord's root is the tonic          | ``FIRST_CHORD_TONIC_BONUS`` (3) |
+------------------------------------------+---------------------------------+
| last chord's root is the tonic           | ``LAST_CHORD_TONIC_BONUS`` (1)  |
+------------------------------------------+---------------------------------+

The tonic bonuses are deliberately heavy: worship songs nearly always open
and close on the tonic, and the bonuses settle keys that share most of their
chords (C and G, say).  The weights are empirical.

The highest score wins; on a tie the key listed first in
:data:`KEY_SIGNATURES` wins.
"""

import logging
import re

from .notes import is_chord, normalize_chord, normalize_root, parse_root
from .sheet import is_chord_line

logger = logging.getLogger(__name__)

DEFAULT_KEY = "C"

FIRST_CHORD_TONIC_BONUS = 3
LAST_CHORD_TONIC_BONUS = 1

# Iteration order is the tie-break order.
KEY_SIGNATURES: dict[str, tuple[str, ...]] = {
    "C": ("C", "Dm", "Em", "F", "G", "Am"),
    "G": ("G", "Am", "Bm", "C", "D", "Em"),
    "D": ("D", "Em", "F#m", "G", "A", "Bm"),
    "A": ("A", "Bm", "C#m", "D", "E", "F#m"),
    "E": ("E", "F#m", "G#m", "A", "B", "C#m"),
    "B": ("B", "C#m", "D#m", "E", "F#", "G#m"),
    "F#": ("F#", "G#m", "A#m", "B", "C#", "D#m"),
    "F": ("F", "Gm", "Am", "Bb", "C", "Dm"),
    "Bb": ("Bb", "Cm", "Dm", "Eb", "F", "Gm"),
    "Eb": ("Eb", "Fm", "Gm", "Ab", "Bb", "Cm"),
    "Ab": ("Ab", "Bbm", "Cm", "Db", "Eb", "Fm"),
    "Db": ("Db", "Ebm", "Fm", "Gb", "Ab", "Bbm"),
}

_BRACKET_RE = re.compile(r"\[([^\]]+)\]")
_TOKEN_RE = re.compile(r"\S+")


# ---------------------------------------------------------------------------
# Chord extraction
# ---------------------------------------------------------------------------


def extract_chords(text: str) -> list[str]:
    """Return every chord in *text*, in reading order.

    Chords come from ``[Chord]`` markers and from the tokens of chord lines
    (chord-over-lyrics layout).  Section markers and stray words never count.
    """
    chords: list[str] = []
    for line in text.split("\n"):
        found = [(m.start(), m.group(1)) for m in _BRACKET_RE.finditer(line) if is_chord(m.group(1))]
        if is_chord_line(line):
            found += [(m.start(), m.group()) for m in _TOKEN_RE.finditer(line) if is_chord(m.group())]
        chords.extend(chord.strip() for _, chord in sorted(found))
    return chords


# ---------------------------------------------------------------------------
# Scoring
# ---------------------------------------------------------------------------


def _root(chord: str) -> str:
    parsed = parse_root(chord)
    return normalize_root(parsed.root) if parsed else ""


def _in_vocabulary(chord: str, vocabulary: tuple[str, ...]) -> bool:
    normalized = normalize_chord(chord)
    root = _root(chord)
    for key_chord in vocabulary:
        target = normalize_chord(key_chord)
        if normalized == target or root == target:
            return True
    return False


def score_key(chords: list[str], key: str) -> int:
    """Score how well *chords* fit the major key *key*."""
    vocabulary = KEY_SIGNATURES[key]
    score = sum(1 for chord in chords if _in_vocabulary(chord, vocabulary))

    tonic = normalize_root(key)
    if chords and _root(chords[0]) == tonic:
        score += FIRST_CHORD_TONIC_BONUS
    if len(chords) > 1 and _root(chords[-1]) == tonic:
        score += LAST_CHORD_TONIC_BONUS
    return score


def key_scores(text: str) -> dict[str, int]:
    """Score of every key for *text*, in :data:`KEY_SIGNATURES` order."""
    chords = extract_chords(text)
    return {key: score_key(chords, key) for key in KEY_SIGNATURES}


def detect_key(text: str) -> str:
    """Best-matching major key for *text*, or ``DEFAULT_KEY`` without chords."""
    chords = extract_chords(text)
    if not chords:
        return DEFAULT_KEY

    best_key = DEFAULT_KEY
    best_score = 0
    for key in KEY_SIGNATURES:
        score = score_key(chords, key)
        logger.debug("key %s scored %d", key, score)
        if score > best_score:
            best_key, best_score = key, score

    logger.debug("detected key %s from %d chords", best_key, len(chords))
    return best_key
