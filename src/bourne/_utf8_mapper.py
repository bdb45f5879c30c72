"""Maps character positions in decoded text to UTF-8 byte offsets and back."""

from __future__ import annotations

from bisect import bisect_right
from typing import Final

_ONE_BYTE_LIMIT: Final = 0x80
_TWO_BYTE_LIMIT: Final = 0x800
_THREE_BYTE_LIMIT: Final = 0x10000


def utf8_width(char: str) -> int:
    """Number of bytes the character occupies when encoded as UTF-8."""
    code = ord(char)
    if code < _ONE_BYTE_LIMIT:
        return 1
    if code < _TWO_BYTE_LIMIT:
        return 2
    if code < _THREE_BYTE_LIMIT:
        return 3
    return 4


class UTF8PositionMapper:
    """UTF-8 position mapping with a checkpoint system.

    Instead of storing the byte offset of every character, this mapper
    records the offset of every ``checkpoint_interval``-th character and walks
    forward from the nearest checkpoint. Checkpoints are only built for
    non-ASCII text; for ASCII text both mappings are the identity.
    """

    def __init__(self, text: str, checkpoint_interval: int = 256) -> None:
        """Initialize position mapper.

        Args:
            text: The decoded document
            checkpoint_interval: Characters between checkpoints
        """
        if checkpoint_interval <= 0:
            raise ValueError("checkpoint_interval must be positive")
        self.text: Final = text
        self.checkpoint_interval: Final = checkpoint_interval
        self._is_ascii_only: Final = text.isascii()
        # _checkpoints[i] is the byte offset of character i * interval
        self._checkpoints: list[int] = []

    def _build_checkpoints(self) -> None:
        byte_pos = 0
        checkpoints = [0]
        interval = self.checkpoint_interval
        for char_pos, char in enumerate(self.text, start=1):
            byte_pos += utf8_width(char)
            if char_pos % interval == 0:
                checkpoints.append(byte_pos)
        self._checkpoints = checkpoints

    def char_to_byte(self, char_pos: int) -> int:
        """Convert a character position to a UTF-8 byte offset.

        Positions past the end of the text clamp to the encoded length.
        """
        if self._is_ascii_only:
            return min(char_pos, len(self.text))
        if not self._checkpoints:
            self._build_checkpoints()

        char_pos = min(char_pos, len(self.text))
        index = char_pos // self.checkpoint_interval
        byte_pos = self._checkpoints[index]
        for i in range(index * self.checkpoint_interval, char_pos):
            byte_pos += utf8_width(self.text[i])
        return byte_pos

    def byte_to_char(self, byte_pos: int) -> int:
        """Convert a UTF-8 byte offset to a character position.

        An offset inside a multi-byte sequence maps to the character that
        contains it.
        """
        if self._is_ascii_only:
            return min(byte_pos, len(self.text))
        if not self._checkpoints:
            self._build_checkpoints()

        index = bisect_right(self._checkpoints, byte_pos) - 1
        char_pos = index * self.checkpoint_interval
        current = self._checkpoints[index]
        while char_pos < len(self.text):
            width = utf8_width(self.text[char_pos])
            if current + width > byte_pos:
                break
            current += width
            char_pos += 1
        return char_pos
