from chordshift.chordpro import ChordProFormatter
from chordshift.models import Song


def _song(**kwargs) -> Song:
    defaults = dict(title="Amazing Grace", artist="John Newton")
    defaults.update(kwargs)
    return Song(**defaults)


def _render(song: Song) -> str:
    return ChordProFormatter().render(song)


# ---------------------------------------------------------------------------
# Metadata
# ---------------------------------------------------------------------------


def test_title_and_artist_in_output():
    out = _render(_song())
    assert "{title: Amazing Grace}" in out
    assert "{artist: John Newton}" in out


def test_stored_key_emitted():
    assert "{key: Bb}" in _render(_song(key="Bb", lyrics="[G]Amazing grace"))


def test_key_detected_when_not_stored():
    out = _render(_song(lyrics="[G]Amazing [C]grace how [G]sweet the [D]sound"))
    assert "{key: G}" in out


def test_key_defaults_to_c_without_chords():
    assert "{key: C}" in _render(_song(lyrics="no chords here"))


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------


def test_verse_section_directives():
    out = _render(_song(lyrics="[Verse 1]\n[D]some lyrics"))
    assert "{start_of_verse: Verse 1}" in out
    assert "{end_of_verse}" in out
    assert "[D]some lyrics" in out


def test_verse_n_label_preserved_in_directive():
    assert "{start_of_verse: Verse 2}" in _render(_song(lyrics="[Verse 2]\nx"))


def test_chorus_section_directives():
    out = _render(_song(lyrics="[Chorus]\n[G]chorus line"))
    assert "{start_of_chorus}" in out
    assert "{end_of_chorus}" in out


def test_bridge_section_directives():
    out = _render(_song(lyrics="[Bridge]\n[A]bridge"))
    assert "{start_of_bridge}" in out
    assert "{end_of_bridge}" in out


def test_bridge_label_not_transposed_into_chord():
    # "Bridge" starts with B but is a section, so it never shows up as a chord line
    out = _render(_song(lyrics="[Bridge]\n[A]bridge"))
    assert "[Bridge]" not in out


def test_other_labels_rendered_as_comment():
    out = _render(_song(lyrics="[Intro]\n[D] [G]\n\n[Tag]\n[D]"))
    assert "{comment: Intro}" in out
    assert "{comment: Tag}" in out
    assert "{start_of_intro}" not in out


def test_unlabeled_lines_no_directive():
    out = _render(_song(lyrics="plain line"))
    assert "plain line" in out
    assert "{start_of" not in out
    assert "{comment" not in out


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------


def test_blank_line_between_sections():
    out = _render(_song(lyrics="[Verse 1]\nline one\n[Chorus]\nline two"))
    assert "{end_of_verse}\n\n{start_of_chorus}" in out


def test_blank_lines_inside_lyrics_not_emitted():
    out = _render(_song(lyrics="[Verse 1]\none\n\n\ntwo"))
    assert "one\ntwo" in out


def test_output_ends_with_newline():
    assert _render(_song()).endswith("\n")


def test_metadata_comes_before_sections():
    out = _render(_song(lyrics="[Verse 1]\nlyric"))
    assert out.index("{title:") < out.index("{start_of_verse")
