# typist.py
from __future__ import annotations

from enigma import Enigma


def type_message(machine: Enigma, text: str) -> str:
    """
    Press every key of *text* on *machine* and return the lamps, letter for
    letter. Spaces are only there for the operator's eyes: they are copied
    through and never turn a rotor.
    """
    return "".join(ch if ch == " " else machine.press_key(ch) for ch in text)


def group_letters(text: str, block: int = 5) -> str:
    """Regroup the letters of *text* into blocks, the way messages were sent."""
    letters = text.replace(" ", "")
    return " ".join(letters[i : i + block] for i in range(0, len(letters), block))
