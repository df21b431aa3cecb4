"""Key identifiers and the byte sequences terminals send for them.

Identifiers look like ``"up"``, ``"ctrl+a"`` or ``"alt+b"``. Only the
legacy (xterm/VT100) encodings are covered: a key maps to every sequence a
common terminal may emit for it, so all of them can be bound at once.
"""

from __future__ import annotations

KeyId = str

ESC = b"\x1b"

# ---------------------------------------------------------------------------
# Named keys
# ---------------------------------------------------------------------------

KEY_SEQUENCES: dict[str, list[bytes]] = {
    "escape": [ESC],
    "esc": [ESC],
    "enter": [b"\r"],
    "return": [b"\r"],
    "tab": [b"\t"],
    "space": [b" "],
    "backspace": [b"\x7f"],
    "delete": [b"\x1b[3~"],
    "insert": [b"\x1b[2~"],
    "up": [b"\x1b[A", b"\x1bOA"],
    "down": [b"\x1b[B", b"\x1bOB"],
    "right": [b"\x1b[C", b"\x1bOC"],
    "left": [b"\x1b[D", b"\x1bOD"],
    "home": [b"\x1b[H", b"\x1bOH", b"\x1b[1~", b"\x1b[7~"],
    "end": [b"\x1b[F", b"\x1bOF", b"\x1b[4~", b"\x1b[8~"],
    "pageUp": [b"\x1b[5~"],
    "pageDown": [b"\x1b[6~"],
}

# Characters that have a C0 control code when combined with Ctrl
_CTRL_SYMBOLS = "@[\\]^_"


def ctrl_byte(key: str) -> int:
    """C0 control code for ``ctrl+<key>`` (``ctrl+a`` is 0x01)."""
    if len(key) != 1:
        raise ValueError(f"Unknown key: ctrl+{key}")
    ch = key.lower()
    if "a" <= ch <= "z" or key in _CTRL_SYMBOLS:
        return ord(key.upper()) & 0x1F
    if key == "?":
        return 0x7F
    raise ValueError(f"Unknown key: ctrl+{key}")


def _base_sequences(key: str) -> list[bytes]:
    if key in KEY_SEQUENCES:
        return list(KEY_SEQUENCES[key])
    if len(key) == 1:
        return [key.encode("utf-8")]
    raise ValueError(f"Unknown key: {key}")


def key_sequences(key_id: KeyId) -> list[bytes]:
    """Byte sequences a terminal sends for *key_id*.

    >>> key_sequences("ctrl+a")
    [b'\\x01']
    >>> key_sequences("alt+b")
    [b'\\x1bb']
    """
    if not key_id:
        raise ValueError("Empty key identifier")
    if key_id in KEY_SEQUENCES or len(key_id) == 1:
        return _base_sequences(key_id)

    *modifiers, key = key_id.split("+")
    # "ctrl++" style identifiers name the plus key itself
    if key == "" and key_id.endswith("++"):
        modifiers, key = key_id[:-2].split("+"), "+"
    mods = set(modifiers)
    unknown = mods - {"ctrl", "alt"}
    if unknown or len(mods) != len(modifiers):
        raise ValueError(f"Unknown key: {key_id}")

    if "ctrl" in mods:
        sequences = [bytes((ctrl_byte(key),))]
    else:
        sequences = _base_sequences(key)

    if "alt" in mods:
        sequences = [ESC + seq for seq in sequences]
    return sequences


def describe_sequence(sequence: bytes) -> str:
    """Human-readable rendering of *sequence*, e.g. ``"ESC [ D"``."""
    parts = []
    for byte in sequence:
        if byte == 0x1B:
            parts.append("ESC")
        elif byte == 0x7F:
            parts.append("DEL")
        elif byte < 0x20:
            parts.append("^" + chr(byte + 0x40))
        else:
            parts.append(chr(byte))
    return " ".join(parts)
