"""ChordPro export of a stored song.

The song's lyrics are already inline ``[Chord]`` notation, which is ChordPro's
own chord syntax, so export is mostly about structure.  The output opens with
``{title}``, ``{artist}`` and ``{key}``; the lyrics are then cut into sections
at their marker lines and each section is wrapped by its label:

* ``[Verse N]`` -> ``{start_of_verse: Verse N}`` ... ``{end_of_verse}``
* ``[Chorus]``, ``[Bridge]`` -> bare ``{start_of_chorus}`` / ``{start_of_bridge}``
  pairs
* any other marker (``[Intro]``, ``[Coda]``) -> a ``{comment: Intro}`` line
* lines before the first marker are written as they are

Usage::

    text = ChordProFormatter().render(song)
"""

from .keys import detect_key
from .lyrics import split_sections
from .models import Section, Song

# Section labels whose directives ChordPro has standardised.
_STRUCTURED = {
    "verse": ("start_of_verse", "end_of_verse"),
    "chorus": ("start_of_chorus", "end_of_chorus"),
    "bridge": ("start_of_bridge", "end_of_bridge"),
}


class ChordProFormatter:
    """Render a :class:`~chordshift.models.Song` to ChordPro text."""

    def render(self, song: Song) -> str:
        """Return ChordPro text for *song*.

        ``{key}`` is the song's stored key, or the key detected from its
        lyrics when none is stored.  The result ends with a single newline.
        """
        parts: list[str] = [
            f"{{title: {song.title}}}",
            f"{{artist: {song.artist}}}",
            f"{{key: {song.key or detect_key(song.lyrics)}}}",
        ]

        for section in split_sections(song.lyrics):
            parts.append("")  # blank line before every section
            parts.extend(_render_section(section))

        return "\n".join(parts) + "\n"


def _render_section(section: Section) -> list[str]:
    """Return the lines for one section (no trailing blank line)."""
    label = section.label
    if not label:
        return list(section.lines)

    first_word = label.lower().split()[0]  # "verse" from "Verse 1"
    if first_word in _STRUCTURED:
        start_dir, end_dir = _STRUCTURED[first_word]
        # Verse keeps its number; chorus and bridge take a bare directive
        start_line = f"{{{start_dir}: {label}}}" if first_word == "verse" else f"{{{start_dir}}}"
        return [start_line, *section.lines, f"{{{end_dir}}}"]

    return [f"{{comment: {label}}}", *section.lines]
