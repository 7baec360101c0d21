"""Keyboard input parsing and matching for terminal applications.

Handles legacy (xterm-style) terminal sequences and modifier key
combinations. ``matches_key`` checks whether raw terminal input corresponds
to a named key identifier such as ``"ctrl+u"`` or ``"shift+tab"``.
"""

from __future__ import annotations

from tuipick.utils import is_control_char

KeyId = str

BRACKETED_PASTE_START = "\x1b[200~"
BRACKETED_PASTE_END = "\x1b[201~"

MODIFIERS: dict[str, int] = {
    "shift": 1,
    "alt": 2,
    "ctrl": 4,
}

# Legacy escape sequences -> key names
LEGACY_KEY_SEQUENCES: dict[str, str] = {
    "\x1b[A": "up",
    "\x1b[B": "down",
    "\x1b[C": "right",
    "\x1b[D": "left",
    "\x1b[H": "home",
    "\x1b[F": "end",
    "\x1bOA": "up",
    "\x1bOB": "down",
    "\x1bOC": "right",
    "\x1bOD": "left",
    "\x1bOH": "home",
    "\x1bOF": "end",
    "\x1b[1~": "home",
    "\x1b[4~": "end",
    "\x1b[2~": "insert",
    "\x1b[3~": "delete",
    "\x1b[5~": "pageUp",
    "\x1b[6~": "pageDown",
    "\x1b[E": "clear",
}

_CSI_LETTER_KEYS = {"A": "up", "B": "down", "C": "right", "D": "left", "H": "home", "F": "end"}
_CSI_TILDE_KEYS = {"2": "insert", "3": "delete", "5": "pageUp", "6": "pageDown"}


def _modified_sequences(bits: int) -> dict[str, str]:
    # xterm encodes modifiers as 1 + bitmask
    param = bits + 1
    sequences = {f"\x1b[1;{param}{c}": name for c, name in _CSI_LETTER_KEYS.items()}
    sequences.update({f"\x1b[{n};{param}~": name for n, name in _CSI_TILDE_KEYS.items()})
    return sequences


# Modifier bitmask -> (sequence -> key name)
MODIFIED_KEY_SEQUENCES: dict[int, dict[str, str]] = {
    bits: _modified_sequences(bits) for bits in range(1, 8)
}

_LEGACY_SEQUENCE_KEYS = frozenset(LEGACY_KEY_SEQUENCES.values())

# Shifted key mapping for symbols (shift + base key)
SHIFTED_KEY_MAP: dict[str, str] = {
    "`": "~",
    "1": "!",
    "2": "@",
    "3": "#",
    "4": "$",
    "5": "%",
    "6": "^",
    "7": "&",
    "8": "*",
    "9": "(",
    "0": ")",
    "-": "_",
    "=": "+",
    "[": "{",
    "]": "}",
    "\\": "|",
    ";": ":",
    "'": '"',
    ",": "<",
    ".": ">",
    "/": "?",
}


def raw_ctrl_char(key: str) -> str | None:
    """Return the control character for a key, or ``None`` if not applicable.

    For example, ``raw_ctrl_char("a")`` returns ``"\\x01"``.
    """
    if len(key) != 1:
        return None
    code = ord(key.lower())
    if ord("a") <= code <= ord("z"):
        return chr(code & 0x1F)
    ctrl_map: dict[str, str] = {
        "[": chr(27),
        "\\": chr(28),
        "]": chr(29),
        "^": chr(30),
        "_": chr(31),
        "@": chr(0),
        "?": chr(127),
    }
    return ctrl_map.get(key)


def parse_key_id(key_id: str) -> tuple[int, str] | None:
    """Split a key identifier like ``"ctrl+shift+a"`` into ``(modifiers, key)``.

    ``modifiers`` is a bitmask (shift=1, alt=2, ctrl=4). Returns ``None`` if
    there is no base key.
    """
    if not key_id:
        return None

    # "+" on its own or as the last part is the plus key, not a separator
    if key_id == "+" or key_id.endswith("++"):
        prefix, key = key_id[:-1], "+"
        parts = [p for p in prefix.split("+") if p]
    else:
        *parts, key = key_id.split("+")

    modifiers = 0
    for part in parts:
        bit = MODIFIERS.get(part.lower())
        if bit is None:
            return None
        modifiers |= bit

    if not key:
        return None
    return modifiers, key


def is_printable(data: str) -> bool:
    """True if *data* is text to insert rather than a key sequence."""
    return bool(data) and not any(is_control_char(ch) for ch in data)


def matches_key(data: str, key_id: str) -> bool:  # noqa: C901
    """Return ``True`` if *data* (raw terminal input) matches the named *key_id*.

    *key_id* examples: ``"a"``, ``"ctrl+a"``, ``"shift+tab"``, ``"pageDown"``.
    """
    parsed = parse_key_id(key_id)
    if parsed is None:
        return False
    modifiers, key = parsed

    has_ctrl = bool(modifiers & MODIFIERS["ctrl"])
    has_shift = bool(modifiers & MODIFIERS["shift"])
    has_alt = bool(modifiers & MODIFIERS["alt"])
    plain = modifiers == 0
    alt_only = modifiers == MODIFIERS["alt"]

    if key in ("escape", "esc"):
        if plain:
            return data == "\x1b"
        return alt_only and data == "\x1b\x1b"

    if key == "space":
        if plain:
            return data == " "
        if modifiers == MODIFIERS["ctrl"]:
            return data == "\x00"
        return alt_only and data == "\x1b "

    if key == "tab":
        if plain:
            return data == "\t"
        if modifiers == MODIFIERS["shift"]:
            return data == "\x1b[Z"
        return alt_only and data == "\x1b\t"

    if key in ("enter", "return"):
        if plain:
            return data in ("\r", "\n")
        return alt_only and data in ("\x1b\r", "\x1b\n")

    if key == "backspace":
        if plain:
            return data in ("\x7f", "\x08")
        if modifiers == MODIFIERS["ctrl"]:
            return data == "\x08"
        return alt_only and data in ("\x1b\x7f", "\x1b\x08")

    if key in _LEGACY_SEQUENCE_KEYS:
        if plain:
            return LEGACY_KEY_SEQUENCES.get(data) == key
        return MODIFIED_KEY_SEQUENCES[modifiers].get(data) == key

    if len(key) == 1:
        return _match_char_key(data, key, has_ctrl, has_shift, has_alt)

    return False


def _match_char_key(
    data: str, key: str, has_ctrl: bool, has_shift: bool, has_alt: bool
) -> bool:
    """Match a single character key (letter, digit, or symbol) with modifiers."""
    if not has_ctrl and not has_shift and not has_alt:
        return data == key

    if has_ctrl and not has_shift:
        ctrl = raw_ctrl_char(key)
        if ctrl is None:
            return False
        return data == ("\x1b" + ctrl if has_alt else ctrl)

    if has_shift and not has_ctrl:
        if key.isalpha():
            shifted = key.upper()
        else:
            shifted = SHIFTED_KEY_MAP.get(key, "")
        if not shifted:
            return False
        return data == ("\x1b" + shifted if has_alt else shifted)

    if has_alt and not has_ctrl and not has_shift:
        return data == "\x1b" + key

    return False
