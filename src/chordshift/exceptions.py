class ChordShiftError(Exception):
    """Base exception for chordshift."""


class UnknownKeyError(ChordShiftError):
    """Raised when a key label supplied by the caller is not a note name."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Unknown key: {key!r} (expected a note such as C, F# or Bb)")
