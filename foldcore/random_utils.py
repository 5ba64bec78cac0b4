"""
Seeded randomness for every derived trait and every fold.
One linear-congruential generator, keyed by an integer seed. Components never share
a generator: each one builds its own from seed + channel offset (see traits.channels).
All state updates are exact integer arithmetic so a constrained evaluator can
reproduce every roll bit-for-bit.
"""
from typing import Sequence, TypeVar

T = TypeVar("T")

LCG_MULT = 1103515245
LCG_INC = 12345
LCG_MASK = 0x7FFFFFFF
_SPAN = LCG_MASK + 1

ROLL_SCALE = 10000  # rolls are basis points: 2500 == 25%


class SeededRNG:
    """Linear-congruential generator: state = (state * 1103515245 + 12345) & 0x7fffffff."""

    __slots__ = ("state",)

    def __init__(self, seed: int) -> None:
        self.state = abs(int(seed)) or 1

    def next_state(self) -> int:
        self.state = (self.state * LCG_MULT + LCG_INC) & LCG_MASK
        return self.state

    def roll(self) -> int:
        """Integer roll in [0, 10000). Use for every categorical comparison."""
        return self.next_state() * ROLL_SCALE // _SPAN

    def below(self, n: int) -> int:
        """Integer index in [0, n)."""
        if n <= 0:
            raise ValueError("below() needs n > 0")
        return self.next_state() * n // _SPAN

    def random(self) -> float:
        """Float in [0, 1]. Only for continuous parameters, never for labels."""
        return self.next_state() / LCG_MASK

    def uniform(self, low: float, high: float) -> float:
        return low + self.random() * (high - low)

    def pick(self, items: Sequence[T]) -> T:
        return items[self.below(len(items))]

    def weighted_index(self, weights: Sequence[float]) -> int:
        """Index drawn proportionally to weights; 0 when every weight is zero."""
        total = sum(weights)
        if total <= 0:
            self.next_state()
            return 0
        r = self.random() * total
        for i, w in enumerate(weights):
            r -= w
            if r <= 0:
                return i
        return len(weights) - 1


def derive_channel(seed: int, channel: int) -> SeededRNG:
    """Fresh generator for one named channel (seed + offset)."""
    return SeededRNG(int(seed) + channel)


def _int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def hash_seed(seed: int, salt: str) -> int:
    """
    Perturb a working seed with a context string (e.g. "skip3", "fold12").
    32-bit rolling hash; never returns 0.
    """
    h = _int32(int(seed))
    for ch in salt:
        h = _int32((h << 5) - h + ord(ch))
    return abs(h) or 1


def seed_from_hex(hex_seed: str) -> int:
    """Host seed helper: upper 64 bits of a hex digest, reduced mod 0x7fffffff."""
    digits = hex_seed[2:] if hex_seed.lower().startswith("0x") else hex_seed
    if not digits:
        raise ValueError("empty hex seed")
    return int(digits[:16], 16) % LCG_MASK
