"""
The 256-entry reference colour table: 216 websafe cube colours, 16 CGA colours, 24 grays.
Built once, immutable afterwards. Pass a ColorTable explicitly where you can;
default_table() memoises one shared instance for callers that don't care.
"""
from dataclasses import dataclass
from functools import lru_cache
from types import MappingProxyType
from typing import Mapping

from .colors import (
    color_distance,
    has_good_contrast,
    hex_to_rgb,
    luminance,
    rgb_to_hex,
    saturation_tier,
    temperature,
)

CUBE_LEVELS = (0x00, 0x33, 0x66, 0x99, 0xCC, 0xFF)

CGA_COLORS: tuple[tuple[str, str], ...] = (
    ("#000000", "black"),
    ("#0000AA", "blue"),
    ("#00AA00", "green"),
    ("#00AAAA", "cyan"),
    ("#AA0000", "red"),
    ("#AA00AA", "magenta"),
    ("#AA5500", "brown"),
    ("#AAAAAA", "lightGray"),
    ("#555555", "darkGray"),
    ("#5555FF", "lightBlue"),
    ("#55FF55", "lightGreen"),
    ("#55FFFF", "lightCyan"),
    ("#FF5555", "lightRed"),
    ("#FF55FF", "lightMagenta"),
    ("#FFFF55", "yellow"),
    ("#FFFFFF", "white"),
)

GRAY_STEPS = 24


@dataclass(frozen=True)
class ColorEntry:
    hex: str
    r: int
    g: int
    b: int
    luminance: float
    temperature: str                  # warm | cool | neutral
    saturation: str                   # gray | muted | chromatic | vivid
    category: str                     # websafe | cga | grayscale
    cube_pos: tuple[int, int, int] | None = None
    name: str | None = None

    @classmethod
    def from_rgb(cls, r: int, g: int, b: int, category: str, **extra) -> "ColorEntry":
        return cls(
            hex=rgb_to_hex(r, g, b),
            r=r,
            g=g,
            b=b,
            luminance=luminance(r, g, b),
            temperature=temperature(r, g, b),
            saturation=saturation_tier(r, g, b),
            category=category,
            **extra,
        )


def _websafe() -> list[ColorEntry]:
    return [
        ColorEntry.from_rgb(CUBE_LEVELS[ri], CUBE_LEVELS[gi], CUBE_LEVELS[bi], "websafe", cube_pos=(ri, gi, bi))
        for ri in range(6)
        for gi in range(6)
        for bi in range(6)
    ]


def _cga() -> list[ColorEntry]:
    return [ColorEntry.from_rgb(*hex_to_rgb(hex_color), "cga", name=name) for hex_color, name in CGA_COLORS]


def _grayscale() -> list[ColorEntry]:
    colors = []
    for i in range(GRAY_STEPS):
        v = round(i / (GRAY_STEPS - 1) * 255)
        colors.append(ColorEntry.from_rgb(v, v, v, "grayscale"))
    return colors


class ColorTable:
    """Immutable reference table plus the filtered pools palette generation draws from."""

    def __init__(self, entries: tuple[ColorEntry, ...]) -> None:
        self.entries = entries
        by_hex: dict[str, ColorEntry] = {}
        by_cube: dict[tuple[int, int, int], ColorEntry] = {}
        for c in entries:
            by_hex.setdefault(c.hex, c)
            if c.cube_pos is not None:
                by_cube[c.cube_pos] = c
        self._by_hex: Mapping[str, ColorEntry] = MappingProxyType(by_hex)
        self._by_cube: Mapping[tuple[int, int, int], ColorEntry] = MappingProxyType(by_cube)

        self.by_luminance: Mapping[str, tuple[ColorEntry, ...]] = MappingProxyType({
            "dark": self.where(lambda c: c.luminance < 30),
            "mid_dark": self.where(lambda c: 20 <= c.luminance < 50),
            "mid": self.where(lambda c: 40 <= c.luminance < 70),
            "mid_light": self.where(lambda c: 55 <= c.luminance < 85),
            "light": self.where(lambda c: c.luminance >= 70),
        })
        self.by_temperature: Mapping[str, tuple[ColorEntry, ...]] = MappingProxyType({
            t: self.where(lambda c, t=t: c.temperature == t) for t in ("warm", "cool", "neutral")
        })
        self.by_saturation: Mapping[str, tuple[ColorEntry, ...]] = MappingProxyType({
            s: self.where(lambda c, s=s: c.saturation == s) for s in ("gray", "muted", "chromatic", "vivid")
        })
        self.chromatic_websafe = self.where(lambda c: c.category == "websafe" and c.saturation != "gray")
        self.cga = self.where(lambda c: c.category == "cga")
        self.cga_chromatic = self.where(lambda c: c.category == "cga" and c.temperature != "neutral")

    @classmethod
    def build(cls) -> "ColorTable":
        return cls(tuple(_websafe() + _cga() + _grayscale()))

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)

    def where(self, predicate) -> tuple[ColorEntry, ...]:
        return tuple(c for c in self.entries if predicate(c))

    def find(self, hex_color: str) -> ColorEntry:
        """Entry for a hex string; unknown colours fall back to the first entry (black)."""
        return self._by_hex.get(hex_color.upper(), self.entries[0])

    def named(self, name: str) -> ColorEntry:
        for c in self.cga:
            if c.name == name:
                return c
        raise KeyError(name)

    def contrasting(self, color: ColorEntry, min_ratio: float = 4.5) -> tuple[ColorEntry, ...]:
        return self.where(lambda c: has_good_contrast(color, c, min_ratio))

    def cube_neighbors(self, color: ColorEntry, max_steps: int) -> list[ColorEntry]:
        """Websafe colours within max_steps (Manhattan) on the 6x6x6 cube."""
        if color.cube_pos is None:
            return []
        ri, gi, bi = color.cube_pos
        out = []
        for c in self.entries:
            if c.cube_pos is None:
                continue
            dist = abs(c.cube_pos[0] - ri) + abs(c.cube_pos[1] - gi) + abs(c.cube_pos[2] - bi)
            if 0 < dist <= max_steps:
                out.append(c)
        return out

    def complementary_region(self, color: ColorEntry) -> list[ColorEntry]:
        """Opposite corner of the cube, or the opposite temperature for off-cube colours."""
        if color.cube_pos is None:
            opposite = {"warm": "cool", "cool": "warm"}.get(color.temperature, "neutral")
            return list(self.by_temperature[opposite])
        target = tuple(4 if i < 3 else 1 for i in color.cube_pos)
        return [
            c
            for c in self.entries
            if c.cube_pos is not None and all(abs(a - b) <= 1 for a, b in zip(c.cube_pos, target))
        ]

    def cube_diagonal_path(self, start: ColorEntry, end: ColorEntry, steps: int) -> list[ColorEntry]:
        if start.cube_pos is None or end.cube_pos is None:
            return self.interpolate_by_luminance(start, end, steps)
        path = []
        for i in range(steps):
            t = i / (steps - 1)
            pos = tuple(int(round(a + (b - a) * t)) for a, b in zip(start.cube_pos, end.cube_pos))
            found = self._by_cube.get(pos)
            if found is not None:
                path.append(found)
        return path

    def interpolate_by_luminance(self, start: ColorEntry, end: ColorEntry, steps: int) -> list[ColorEntry]:
        """Closest-luminance colours along start->end, keeping start's temperature (or neutral)."""
        candidates = [c for c in self.entries if c.temperature in (start.temperature, "neutral")]
        path = []
        for i in range(steps):
            t = i / (steps - 1)
            target = start.luminance + (end.luminance - start.luminance) * t
            path.append(min(candidates, key=lambda c: abs(c.luminance - target)))
        return path

    def confusable(self, color: ColorEntry, lum_tolerance: float = 10) -> list[ColorEntry]:
        """Same-value colours that differ in temperature or saturation."""
        return [
            c
            for c in self.entries
            if c.hex != color.hex
            and abs(c.luminance - color.luminance) < lum_tolerance
            and (c.temperature != color.temperature or c.saturation != color.saturation)
        ]

    def visual_midpoint(self, c1: ColorEntry, c2: ColorEntry) -> ColorEntry:
        tr, tg, tb = (c1.r + c2.r) / 2, (c1.g + c2.g) / 2, (c1.b + c2.b) / 2
        target_lum = (c1.luminance + c2.luminance) / 2

        def score(c: ColorEntry) -> float:
            rgb = ((c.r - tr) ** 2 + (c.g - tg) ** 2 + (c.b - tb) ** 2) ** 0.5
            return rgb + abs(c.luminance - target_lum) * 2

        return min(self.entries, key=score)

    def neighbors_within(self, color: ColorEntry, low: float, high: float) -> list[ColorEntry]:
        """Colours whose perceptual distance from color is in (low, high)."""
        return [
            c for c in self.entries if c.hex != color.hex and low < color_distance(color, c) < high
        ]


@lru_cache(maxsize=1)
def default_table() -> ColorTable:
    """Process-wide table. Building twice yields an identical table."""
    return ColorTable.build()
