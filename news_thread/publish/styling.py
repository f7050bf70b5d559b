"""Unicode "bold" styling for post titles.

Maps ASCII letters and digits onto the Mathematical Sans-Serif Bold block.
Everything else, including emoji and accented letters, is left untouched.
"""

from __future__ import annotations

import string

_BOLD_UPPER_START = 0x1D5D4
_BOLD_LOWER_START = 0x1D5EE
_BOLD_DIGIT_START = 0x1D7EC

_BOLD_TABLE = {
    **{ord(c): chr(_BOLD_UPPER_START + i) for i, c in enumerate(string.ascii_uppercase)},
    **{ord(c): chr(_BOLD_LOWER_START + i) for i, c in enumerate(string.ascii_lowercase)},
    **{ord(c): chr(_BOLD_DIGIT_START + i) for i, c in enumerate(string.digits)},
}


def to_bold(text: str) -> str:
    return text.translate(_BOLD_TABLE)
