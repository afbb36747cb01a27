from dataclasses import dataclass, field


@dataclass(frozen=True)
class Chord:
    """A chord token split into root, suffix and optional slash bass.

    Example: "F#m7/C#" -> Chord(root="F#", suffix="m7", bass="C#")
    """

    root: str
    suffix: str = ""
    bass: str | None = None

    def __str__(self) -> str:
        if self.bass is None:
            return f"{self.root}{self.suffix}"
        return f"{self.root}{self.suffix}/{self.bass}"


@dataclass(frozen=True)
class ChordPosition:
    """A chord found on a chord line, with the column it starts at."""

    chord: str
    column: int


@dataclass(frozen=True)
class LyricToken:
    """A text segment and the chord that precedes it ("" when none does)."""

    chord: str
    text: str


@dataclass
class ParsedLine:
    """One line of inline lyrics broken into renderable tokens."""

    tokens: list[LyricToken] = field(default_factory=list)
    has_chords: bool = False

    @property
    def text(self) -> str:
        """The plain lyric with every chord marker removed."""
        return "".join(token.text for token in self.tokens)


@dataclass
class Section:
    """A labelled block of a song (verse, chorus, bridge, etc.)."""

    label: str | None  # e.g. "Verse 1", "Chorus", None for unlabelled passages
    lines: list[str] = field(default_factory=list)


@dataclass
class Song:
    """A song record as handed over by the storage layer.

    ``lyrics`` holds inline chord notation, e.g. "[Am]Hello [G]world".
    """

    title: str
    artist: str
    lyrics: str = ""
    key: str | None = None  # stored key; detected from the lyrics when None
    id: str = ""
    created_at: int = 0
    updated_at: int = 0
