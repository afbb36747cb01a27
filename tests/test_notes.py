import pytest

from chordshift.exceptions import UnknownKeyError
from chordshift.models import Chord
from chordshift.notes import (
    DISPLAY_KEYS,
    FLAT_NOTES,
    NOT_FOUND,
    SHARP_NOTES,
    is_chord,
    is_flat_spelling,
    is_section_label,
    key_name,
    key_to_semitone,
    normalize_chord,
    normalize_root,
    note_index,
    parse_chord,
    parse_root,
    prefers_flats,
    require_key,
    same_pitch,
    semitone_diff,
)

# ---------------------------------------------------------------------------
# Tables
# ---------------------------------------------------------------------------


def test_tables_are_enharmonic_pairs():
    for sharp, flat in zip(SHARP_NOTES, FLAT_NOTES):
        assert note_index(sharp) == note_index(flat)


def test_display_keys_labels():
    assert DISPLAY_KEYS[0].label == "C"
    assert DISPLAY_KEYS[1].label == "C#/Db"
    assert DISPLAY_KEYS[10].flats_label == "Bb"
    assert [k.semitones for k in DISPLAY_KEYS] == list(range(12))


# ---------------------------------------------------------------------------
# note_index / spelling
# ---------------------------------------------------------------------------


def test_note_index_sharp_and_flat():
    assert note_index("C") == 0
    assert note_index("C#") == 1
    assert note_index("Db") == 1
    assert note_index("B") == 11


def test_note_index_is_case_sensitive():
    assert note_index("c") == NOT_FOUND
    assert note_index("DB") == NOT_FOUND


def test_note_index_unknown():
    assert note_index("H") == NOT_FOUND
    assert note_index("") == NOT_FOUND


def test_is_flat_spelling():
    assert is_flat_spelling("Bb")
    assert is_flat_spelling("Eb")
    assert not is_flat_spelling("B")
    assert not is_flat_spelling("F#")


def test_normalize_root_flats_to_sharps():
    assert normalize_root("Db") == "C#"
    assert normalize_root("Bb") == "A#"
    assert normalize_root("G") == "G"
    assert normalize_root("H") == "H"


def test_normalize_chord_keeps_suffix():
    assert normalize_chord("Bbm7") == "A#m7"
    assert normalize_chord("Verse") == "Verse"


def test_same_pitch():
    assert same_pitch("C#", "Db")
    assert not same_pitch("C", "Db")
    assert not same_pitch("H", "H")


# ---------------------------------------------------------------------------
# parse_root
# ---------------------------------------------------------------------------


def test_parse_root_two_char_first():
    assert parse_root("C#m7") == ("C#", "m7")
    assert parse_root("Dbmaj7") == ("Db", "maj7")


def test_parse_root_one_char():
    assert parse_root("Am") == ("A", "m")
    assert parse_root("G/B") == ("G", "/B")


def test_parse_root_bare_b_is_not_flat():
    assert parse_root("B") == ("B", "")
    assert parse_root("Bm") == ("B", "m")


def test_parse_root_rejects():
    assert parse_root("") is None
    assert parse_root("H7") is None
    assert parse_root("1") is None
    assert parse_root("am") is None


# ---------------------------------------------------------------------------
# parse_chord / is_chord
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "token",
    ["A", "Am", "Am7", "Cmaj7", "Asus4", "Cadd9", "C#m7", "Bbdim", "Gaug", "Dsus2", "C69", "G/B", "D/F#"],
)
def test_is_chord_accepts(token):
    assert is_chord(token)


@pytest.mark.parametrize(
    "token",
    ["", "H", "Verse", "Chorus", "Amazing", "grace", "am", "G/", "G/H", "Cm7b5", "C5", "[C]"],
)
def test_is_chord_rejects(token):
    assert not is_chord(token)


def test_is_chord_ignores_surrounding_whitespace():
    assert is_chord("  Am  ")


def test_parse_chord_decomposes():
    assert parse_chord("F#m7/C#") == Chord(root="F#", suffix="m7", bass="C#")
    assert parse_chord("Cmaj7") == Chord(root="C", suffix="maj7")


def test_parse_chord_repeated_suffix_words_kept_verbatim():
    assert parse_chord("Cmadd9").suffix == "madd9"


# ---------------------------------------------------------------------------
# is_section_label
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "content",
    [
        "Verse 1", "Chorus", "Bridge", "Pre-Chorus", "Coda", "Intro", "Break", "Chorus x2", "N.C.",
        "Amen", "Emmanuel", "Dance",
    ],
)
def test_is_section_label_true(content):
    assert is_section_label(content)


@pytest.mark.parametrize("content", ["Am", "G/B", "Cm7b5", "G7(b9)", "Ebmaj7", "Dmi7", "CM7", "Bbmin", "Asus"])
def test_is_section_label_false_for_chords(content):
    assert not is_section_label(content)


# ---------------------------------------------------------------------------
# Keys
# ---------------------------------------------------------------------------


def test_key_to_semitone():
    assert key_to_semitone("C") == 0
    assert key_to_semitone("Bb") == 10
    assert key_to_semitone("nonsense") == 0


def test_semitone_diff_wraps_upward():
    assert semitone_diff("C", "D") == 2
    assert semitone_diff("D", "C") == 10
    assert semitone_diff("G", "G") == 0
    assert semitone_diff("A#", "Bb") == 0


def test_semitone_diff_unknown_is_zero():
    assert semitone_diff("C", "X") == 0


def test_key_name_spelling():
    assert key_name(1) == "C#"
    assert key_name(1, use_flats=True) == "Db"
    assert key_name(14) == "D"
    assert key_name(-1) == "B"


def test_prefers_flats():
    assert prefers_flats(5)   # F
    assert prefers_flats(10)  # Bb
    assert not prefers_flats(6)  # F#
    assert not prefers_flats(7)  # G


def test_require_key_canonical_case():
    assert require_key("bb") == "Bb"
    assert require_key(" f# ") == "F#"
    assert require_key("G") == "G"


def test_require_key_unknown_raises():
    with pytest.raises(UnknownKeyError) as exc_info:
        require_key("H")
    assert exc_info.value.key == "H"
