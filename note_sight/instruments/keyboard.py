"""Piano keyboard highlighting."""

from typing import ClassVar, Iterable, Optional, Tuple

from ..note_types import SHARP_NOTES, CanonicalNote, KeyboardKey


class KeyboardMapper:
    """
    Maps a detected note onto a fixed window of piano keys.

    Highlighting matches pitch class only: the window does not follow the
    register of the detected note, so every key with the same pitch class is
    lit, in every octave shown.
    """

    DEFAULT_OCTAVES: ClassVar[Tuple[int, ...]] = (3, 4, 5)

    def __init__(self, octaves: Iterable[int] = DEFAULT_OCTAVES) -> None:
        self._octaves = tuple(int(o) for o in octaves)
        if not self._octaves:
            raise ValueError("Keyboard needs at least one octave")
        self._keys = tuple(
            KeyboardKey(pitch_class, octave)
            for octave in self._octaves
            for pitch_class in SHARP_NOTES
        )

    @property
    def octaves(self) -> Tuple[int, ...]:
        return self._octaves

    @property
    def keys(self) -> Tuple[KeyboardKey, ...]:
        return self._keys

    @property
    def white_keys(self) -> Tuple[KeyboardKey, ...]:
        return tuple(k for k in self._keys if not k.is_black)

    @property
    def black_keys(self) -> Tuple[KeyboardKey, ...]:
        return tuple(k for k in self._keys if k.is_black)

    @staticmethod
    def is_highlighted(key: KeyboardKey, note: Optional[CanonicalNote]) -> bool:
        return note is not None and key.pitch_class == note.pitch_class

    def highlighted_keys(
        self, note: Optional[CanonicalNote]
    ) -> Tuple[KeyboardKey, ...]:
        """All keys sharing the note's pitch class; empty for no note."""
        if note is None:
            return ()
        return tuple(k for k in self._keys if self.is_highlighted(k, note))
