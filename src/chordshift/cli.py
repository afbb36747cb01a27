import logging
import re
import sys
from pathlib import Path
from typing import TextIO

import click

from .chordpro import ChordProFormatter
from .exceptions import ChordShiftError
from .keys import detect_key, key_scores
from .models import Song
from .notes import require_key
from .sheet import to_chord_sheet, to_inline
from .transpose import (
    semitones_to_key,
    shifted_key,
    spelling_for_key,
    transpose_lyrics,
    transpose_sheet,
)

_SPELLINGS = {"auto": None, "sharps": False, "flats": True}

_APOSTROPHE_RE = re.compile(r"['’]")
_SLUG_SEPARATOR_RE = re.compile(r"[\W_]+")


def _slugify(text: str) -> str:
    """``"Blowin' in the Wind"`` -> ``"blowin-in-the-wind"``."""
    text = _APOSTROPHE_RE.sub("", text.lower())
    return _SLUG_SEPARATOR_RE.sub("-", text).strip("-")


def _default_filename(artist: str, title: str) -> str:
    return f"{_slugify(artist)}-{_slugify(title)}.cho"


def _emit(text: str, output_path: str | None) -> None:
    if output_path:
        dest = Path(output_path)
        dest.write_text(text, encoding="utf-8")
        click.echo(f"Written to {dest}")
        return
    click.echo(text, nl=not text.endswith("\n"))


def _fail(exc: ChordShiftError) -> None:
    click.echo(f"Error: {exc}", err=True)
    sys.exit(1)


_source_argument = click.argument(
    "source", type=click.File("r", encoding="utf-8"), default="-", required=False
)
_output_option = click.option(
    "-o", "--output", "output_path", default=None, metavar="PATH",
    help="Write to PATH instead of stdout.",
)


@click.group()
@click.option("-v", "--verbose", is_flag=True, default=False, help="Log debug output to stderr.")
def main(verbose: bool) -> None:
    """Detect keys, transpose and reformat chord lyrics.

    \b
    SOURCE is a text file of lyrics (or - for stdin) in either layout:
      - inline:             [Am]Amazing [G]grace
      - chords over lyrics: Am      G
                            Amazing grace
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


@main.command()
@_source_argument
@click.option("--scores", is_flag=True, default=False, help="Show the score of every key.")
def key(source: TextIO, scores: bool) -> None:
    """Print the detected key of SOURCE."""
    text = source.read()
    if scores:
        for name, score in key_scores(text).items():
            click.echo(f"{name:<3} {score}")
        return
    click.echo(detect_key(text))


@main.command()
@_source_argument
@click.option("-s", "--semitones", type=int, default=None, help="Shift by N semitones (negative = down).")
@click.option("--to", "target_key", default=None, metavar="KEY", help="Transpose into KEY.")
@click.option("--from", "from_key", default=None, metavar="KEY",
              help="Current key for --to (default: detected).")
@click.option("--spelling", type=click.Choice(list(_SPELLINGS)), default="auto", show_default=True,
              help="Write accidentals as sharps or flats.")
@click.option("--sheet", is_flag=True, default=False,
              help="SOURCE is chords-over-lyrics; transpose its chord lines too.")
@_output_option
def transpose(source: TextIO, semitones: int | None, target_key: str | None, from_key: str | None,
              spelling: str, sheet: bool, output_path: str | None) -> None:
    """Transpose the chords in SOURCE by -s N or --to KEY."""
    if (semitones is None) == (target_key is None):
        raise click.UsageError("Give exactly one of --semitones or --to.")

    text = source.read()
    use_flats = _SPELLINGS[spelling]
    try:
        if target_key is not None:
            target_key = require_key(target_key)
            if from_key is not None:
                from_key = require_key(from_key)
            semitones = semitones_to_key(text, target_key, from_key)
            if use_flats is None:
                use_flats = spelling_for_key(target_key)
    except ChordShiftError as exc:
        _fail(exc)

    transposer = transpose_sheet if sheet else transpose_lyrics
    _emit(transposer(text, semitones, use_flats), output_path)


@main.command()
@_source_argument
@_output_option
def inline(source: TextIO, output_path: str | None) -> None:
    """Convert chords-over-lyrics SOURCE to inline [Chord] notation."""
    _emit(to_inline(source.read()), output_path)


@main.command()
@_source_argument
@_output_option
def sheet(source: TextIO, output_path: str | None) -> None:
    """Convert inline SOURCE to chords-over-lyrics layout."""
    _emit(to_chord_sheet(source.read()), output_path)


@main.command()
@_source_argument
@click.option("--title", required=True, help="Song title.")
@click.option("--artist", required=True, help="Song artist.")
@click.option("--key", "song_key", default=None, metavar="KEY", help="Song key (default: detected).")
@click.option("-s", "--semitones", type=int, default=0, show_default=True,
              help="Transpose before exporting.")
@click.option("-o", "--output", "output_path", default=None, metavar="PATH",
              help="Output file path (default: <artist>-<title>.cho)")
@click.option("--stdout", is_flag=True, default=False,
              help="Print to stdout instead of writing a file.")
def chordpro(source: TextIO, title: str, artist: str, song_key: str | None, semitones: int,
             output_path: str | None, stdout: bool) -> None:
    """Export inline SOURCE as a ChordPro (.cho) song."""
    try:
        if song_key is not None:
            song_key = require_key(song_key)
    except ChordShiftError as exc:
        _fail(exc)

    lyrics = to_inline(source.read())
    if semitones:
        base_key = song_key or detect_key(lyrics)
        song_key = shifted_key(base_key, semitones)
        lyrics = transpose_lyrics(lyrics, semitones, spelling_for_key(song_key))

    song = Song(title=title, artist=artist, lyrics=lyrics, key=song_key)
    chordpro_text = ChordProFormatter().render(song)

    if stdout:
        click.echo(chordpro_text, nl=False)
        return

    dest = Path(output_path) if output_path else Path(_default_filename(artist, title))
    dest.write_text(chordpro_text, encoding="utf-8")
    click.echo(f"Written to {dest}")
