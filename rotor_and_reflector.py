# rotor_and_reflector.py
from __future__ import annotations

from collections.abc import Iterable, Sequence

from debug import Debug
from errors import ConfigurationError

debug = Debug()

ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
NUM_CONTACTS = len(ALPHABET)


def _letter(contact: int) -> str:
    return ALPHABET[contact] if 0 <= contact < NUM_CONTACTS else "?"


def _parse_wiring(wiring: str, kind: str) -> tuple[int, ...]:
    """Turn 'EKMF…' into contacts: position i holds the partner of contact i."""
    if len(wiring) != NUM_CONTACTS:
        raise ConfigurationError(
            f"could not create {kind}: input {wiring!r} is not of length "
            f"{NUM_CONTACTS} but of length {len(wiring)}"
        )
    bad = [ch for ch in wiring if ch not in ALPHABET]
    if bad:
        raise ConfigurationError(
            f"could not create {kind}: {bad[0]!r} in {wiring!r} is not a letter A-Z"
        )
    return tuple(ALPHABET.index(ch) for ch in wiring)


# ── validation ────────────────────────────────────────────────────
def validate_rotor(mapping: Sequence[int]) -> None:
    """Raise ConfigurationError unless *mapping* is a permutation of 0..25."""
    if len(mapping) != NUM_CONTACTS:
        raise ConfigurationError(
            f"invalid rotor {list(mapping)}: {len(mapping)} contacts, expected {NUM_CONTACTS}"
        )
    seen = [False] * NUM_CONTACTS
    for i, to in enumerate(mapping):
        if not 0 <= to < NUM_CONTACTS:
            raise ConfigurationError(
                f"invalid rotor {list(mapping)}: position {i} has invalid value {to}"
            )
        seen[to] = True
    for i, present in enumerate(seen):
        if not present:
            raise ConfigurationError(
                f"invalid rotor {list(mapping)}: value {i} (letter {_letter(i)!r}) is missing"
            )


def validate_reflector(mapping: Sequence[int]) -> None:
    """Raise ConfigurationError unless *mapping* is an involution with no fixed points."""
    if len(mapping) != NUM_CONTACTS:
        raise ConfigurationError(
            f"invalid reflector {list(mapping)}: {len(mapping)} contacts, expected {NUM_CONTACTS}"
        )
    for i, to in enumerate(mapping):
        if not 0 <= to < NUM_CONTACTS:
            raise ConfigurationError(
                f"invalid reflector {list(mapping)}: position {i} has invalid value {to}"
            )
        if to == i:
            raise ConfigurationError(
                f"invalid reflector {list(mapping)}: position {i} "
                f"(letter {_letter(i)!r}) maps to itself"
            )
        if mapping[to] != i:
            raise ConfigurationError(
                f"invalid reflector {list(mapping)}: {_letter(i)!r} maps to "
                f"{_letter(to)!r}, but {_letter(to)!r} maps to {_letter(mapping[to])!r}"
            )


def is_valid_rotor_wiring(wiring: str) -> bool:
    """True if *wiring* would make a working rotor."""
    try:
        validate_rotor(_parse_wiring(wiring, "rotor"))
    except ConfigurationError:
        return False
    return True


def is_valid_reflector_wiring(wiring: str) -> bool:
    """True if *wiring* would make a working reflector."""
    try:
        validate_reflector(_parse_wiring(wiring, "reflector"))
    except ConfigurationError:
        return False
    return True


# ── wheels ────────────────────────────────────────────────────────
class Rotor:
    """
    Wiring and notches of one kind of rotor.

    Contact i on the right face is wired to contact ``rl_mapping[i]`` on the
    left face. ``lr_mapping`` is the way back and is derived here, never
    supplied. A Rotor holds no position; the machine keeps that per slot, so
    one Rotor can sit in any number of machines at once.
    """

    __slots__ = ("_rl", "_lr", "_turnover")

    def __init__(self, rl_mapping: Iterable[int], turnover_points: Iterable[int] = ()) -> None:
        rl = tuple(rl_mapping)
        validate_rotor(rl)
        turnover = frozenset(turnover_points)
        if not all(0 <= t < NUM_CONTACTS for t in turnover):
            raise ConfigurationError(f"turnover points {sorted(turnover)} outside 0-{NUM_CONTACTS - 1}")

        lr = [0] * NUM_CONTACTS
        for i, to in enumerate(rl):
            lr[to] = i

        object.__setattr__(self, "_rl", rl)
        object.__setattr__(self, "_lr", tuple(lr))
        object.__setattr__(self, "_turnover", turnover)

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError("Rotor is immutable")

    def __reduce__(self):
        return (Rotor, (self._rl, self._turnover))

    # ── lookup tables --------------------------------------------
    @property
    def rl_mapping(self) -> tuple[int, ...]:
        return self._rl

    @property
    def lr_mapping(self) -> tuple[int, ...]:
        return self._lr

    @property
    def turnover_points(self) -> frozenset[int]:
        return self._turnover

    def is_turnover(self, rotation: int) -> bool:
        return rotation in self._turnover

    # ── letter views ---------------------------------------------
    @property
    def wiring(self) -> str:
        return "".join(ALPHABET[c] for c in self._rl)

    @property
    def notches(self) -> str:
        return "".join(ALPHABET[c] for c in sorted(self._turnover))

    # ── niceties --------------------------------------------------
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Rotor):
            return NotImplemented
        return self._rl == other._rl and self._turnover == other._turnover

    def __hash__(self) -> int:
        return hash((self._rl, self._turnover))

    def __repr__(self) -> str:
        return f"<Rotor {self.wiring} notches={self.notches}>"


class Reflector:
    """The fixed wheel on the left; wires contacts of the same face in pairs."""

    __slots__ = ("_map",)

    def __init__(self, mapping: Iterable[int]) -> None:
        m = tuple(mapping)
        validate_reflector(m)
        object.__setattr__(self, "_map", m)

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError("Reflector is immutable")

    def __reduce__(self):
        return (Reflector, (self._map,))

    @property
    def mapping(self) -> tuple[int, ...]:
        return self._map

    @property
    def wiring(self) -> str:
        return "".join(ALPHABET[c] for c in self._map)

    def reflect(self, sig: int) -> int:
        out = self._map[sig]
        debug.log("reflector", "%s->%s", _letter(sig), _letter(out))
        return out

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Reflector):
            return NotImplemented
        return self._map == other._map

    def __hash__(self) -> int:
        return hash(self._map)

    def __repr__(self) -> str:
        return f"<Reflector {self.wiring}>"


# ── builders ──────────────────────────────────────────────────────
def make_rotor(wiring: str, turnover: str) -> Rotor:
    """
    Build a Rotor from the usual compact notation: position 0 is 'A' and its
    letter is what 'A' connects to, and so on. *turnover* lists the window
    letter(s) at which the rotor pushes its left neighbour ("Q" for rotor I,
    "ZM" for rotors VI-VIII).
    """
    rl = _parse_wiring(wiring, "rotor")
    bad = [ch for ch in turnover if ch not in ALPHABET]
    if bad:
        raise ConfigurationError(f"could not create rotor: turnover {bad[0]!r} is not a letter A-Z")
    rotor = Rotor(rl, (ALPHABET.index(ch) for ch in turnover))
    debug.log("rotor", "built %r", rotor)
    return rotor


def make_reflector(wiring: str) -> Reflector:
    """Build a Reflector from the compact notation used by make_rotor()."""
    reflector = Reflector(_parse_wiring(wiring, "reflector"))
    debug.log("reflector", "built %r", reflector)
    return reflector
