"""
Palette generation: seed -> background / text / accent.
A chromatic "mother" colour is transformed (value, temperature, saturation, complement,
neighbour) into the text colour over a ground chosen for contrast. Rare glitch palettes
skip all of that on purpose; monochrome palettes use one chromatic voice on black or white.
"""
import logging
from dataclasses import asdict, dataclass
from typing import Any

from ..random_utils import SeededRNG, derive_channel
from ..traits.channels import CHANNEL_PALETTE
from ..traits.derive import (
    GLITCH_CUTOFF,
    GLITCH_KINDS,
    archetype_label,
    generate_monochrome,
    read_palette_rolls,
)
from .colors import color_distance, has_good_contrast
from .table import ColorEntry, ColorTable, default_table

logger = logging.getLogger(__name__)

MIN_TEXT_CONTRAST = 4.5
SATURATION_ORDER = ("gray", "muted", "chromatic", "vivid")


@dataclass(frozen=True)
class Palette:
    bg: str
    text: str
    accent: str
    strategy: str        # full label, e.g. "monochrome/blue", "light/value+accent"
    archetype: str       # label the constrained evaluator reproduces
    color_count: int
    monochrome: bool = False
    glitch: bool = False

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def apply_transformation(
    table: ColorTable, mother: ColorEntry, transform: str, rng: SeededRNG
) -> list[ColorEntry]:
    """Candidate text colours related to mother by one transformation, best first."""
    if transform == "value":
        lum_diff = -40 if mother.luminance > 50 else 40
        target = max(5, min(95, mother.luminance + lum_diff))
        candidates = [
            c
            for c in table
            if c.hex != mother.hex
            and abs(c.luminance - target) < 20
            and (c.temperature == mother.temperature or "neutral" in (c.temperature, mother.temperature))
        ]
        return sorted(
            candidates,
            key=lambda c: (c.temperature != mother.temperature, abs(c.luminance - target)),
        )

    if transform == "temperature":
        if mother.temperature == "warm":
            target_temp = "cool"
        elif mother.temperature == "cool":
            target_temp = "warm"
        else:
            target_temp = "warm" if rng.roll() < 5000 else "cool"
        candidates = [
            c
            for c in table
            if c.hex != mother.hex
            and c.temperature == target_temp
            and abs(c.luminance - mother.luminance) < 25
        ]
        return sorted(candidates, key=lambda c: abs(c.luminance - mother.luminance))

    if transform == "saturation":
        mother_idx = SATURATION_ORDER.index(mother.saturation)
        targets = ("chromatic", "vivid") if mother_idx <= 1 else ("muted", "gray")
        candidates = [
            c
            for c in table
            if c.hex != mother.hex
            and c.saturation in targets
            and abs(c.luminance - mother.luminance) < 30
            and c.temperature in (mother.temperature, "neutral")
        ]
        return sorted(candidates, key=lambda c: -abs(SATURATION_ORDER.index(c.saturation) - mother_idx))

    if transform == "complement":
        candidates = table.complementary_region(mother)
        return sorted(candidates, key=lambda c: -abs(c.luminance - mother.luminance))

    if transform == "neighbor":
        if mother.cube_pos is not None:
            candidates = table.cube_neighbors(mother, 1)
            if len(candidates) < 3:
                candidates = table.cube_neighbors(mother, 2)
        else:
            candidates = table.neighbors_within(mother, 20, 60)
        return sorted(candidates, key=lambda c: color_distance(mother, c))

    raise ValueError(f"Unknown transformation: {transform}")


def _glitch_palette(table: ColorTable, rng: SeededRNG) -> Palette:
    kind = GLITCH_KINDS[rng.below(len(GLITCH_KINDS))]
    if kind == "washed":
        band = table.by_luminance["mid_light" if rng.roll() < 5000 else "mid_dark"]
        bg, text, accent = rng.pick(band), rng.pick(band), rng.pick(band)
    elif kind == "acid":
        vivid = table.by_saturation["vivid"]
        warm = [c for c in vivid if c.temperature == "warm"]
        cool = [c for c in vivid if c.temperature == "cool"]
        bg, text = rng.pick(warm), rng.pick(cool)
        accent = rng.pick(warm if rng.roll() < 5000 else cool)
    elif kind == "void":
        darks = table.where(lambda c: c.luminance < 15)
        less_dark = table.where(lambda c: 10 <= c.luminance < 25)
        bg, text, accent = rng.pick(darks), rng.pick(less_dark), rng.pick(less_dark)
    elif kind == "bleach":
        lights = table.where(lambda c: c.luminance > 85)
        less_light = table.where(lambda c: 70 <= c.luminance < 90)
        bg, text, accent = rng.pick(lights), rng.pick(less_light), rng.pick(less_light)
    else:
        bg, text, accent = rng.pick(table.cga), rng.pick(table.cga), rng.pick(table.cga)
    label = f"glitch/{kind}"
    return Palette(bg.hex, text.hex, accent.hex, label, label, 3, glitch=True)


def _monochrome_palette(table: ColorTable, rng: SeededRNG) -> Palette:
    """One chromatic key on black or white; ground flips when contrast would fail."""
    key = rng.pick(table.cga_chromatic)
    black, white = table.named("black"), table.named("white")
    if key.luminance > 50:
        ground = black
    elif key.luminance < 30:
        ground = black if rng.roll() < 7500 else white
    else:
        ground = black if rng.roll() < 6000 else white
    if not has_good_contrast(ground, key, MIN_TEXT_CONTRAST):
        ground = white if ground is black else black
    return Palette(ground.hex, key.hex, key.hex, f"monochrome/{key.name}", "monochrome", 2, monochrome=True)


def _background_candidates(table: ColorTable, ground: str, mother: ColorEntry) -> tuple[ColorEntry, ...]:
    def matches(c: ColorEntry) -> bool:
        return c.temperature in (mother.temperature, "neutral") or c.saturation == "gray"

    if ground in ("light", "dark"):
        candidates = tuple(c for c in table.by_luminance[ground] if matches(c))
    else:
        candidates = table.where(
            lambda c: 35 <= c.luminance <= 65
            and c.saturation in ("muted", "gray")
            and c.temperature in (mother.temperature, "neutral")
        )
    if not candidates:
        candidates = table.by_luminance["light" if ground == "light" else "dark"]
    return candidates


def _text_color(
    table: ColorTable, bg: ColorEntry, mother: ColorEntry, transform: str, rng: SeededRNG
) -> ColorEntry:
    candidates = [
        c for c in apply_transformation(table, mother, transform, rng) if has_good_contrast(bg, c, MIN_TEXT_CONTRAST)
    ]
    if not candidates:
        logger.debug("no %s candidate contrasts with %s; falling back to value", transform, bg.hex)
        candidates = [
            c for c in apply_transformation(table, mother, "value", rng) if has_good_contrast(bg, c, MIN_TEXT_CONTRAST)
        ]
    if not candidates:
        logger.warning("value fallback empty for %s; using full table", bg.hex)
        candidates = list(table.contrasting(bg, MIN_TEXT_CONTRAST))
    if not candidates:
        return mother
    if len(candidates) > 3:
        return candidates[rng.below(3)]
    return candidates[0]


def _accent_color(table: ColorTable, bg: ColorEntry, text: ColorEntry, rng: SeededRNG) -> ColorEntry:
    """A colour confusable with both ground and text at similar value."""
    seen: set[str] = set()
    candidates = []
    for c in table.confusable(bg, 15) + table.confusable(text, 15):
        if c.hex in seen or c.hex == text.hex or c.saturation == "gray":
            continue
        if not has_good_contrast(bg, c, 3.0):
            continue
        seen.add(c.hex)
        candidates.append(c)
    if candidates:
        vivid = [c for c in candidates if c.saturation in ("vivid", "chromatic")]
        return rng.pick(vivid or candidates)
    midpoint = table.visual_midpoint(bg, text)
    return midpoint if has_good_contrast(bg, midpoint, 2.5) else text


def generate_palette(seed: int, table: ColorTable | None = None) -> Palette:
    """Background / text / accent for one seed. Never raises for an integer seed."""
    table = table or default_table()
    rng = derive_channel(seed, CHANNEL_PALETTE)

    if rng.roll() < GLITCH_CUTOFF:
        return _glitch_palette(table, rng)
    if generate_monochrome(seed):
        return _monochrome_palette(table, rng)

    mother = rng.pick(table.chromatic_websafe)
    ground, transform, use_accent = read_palette_rolls(rng)

    bg = rng.pick(_background_candidates(table, ground, mother))
    text = _text_color(table, bg, mother, transform, rng)
    accent = _accent_color(table, bg, text, rng) if use_accent else text

    label = archetype_label(ground, transform, use_accent)
    return Palette(bg.hex, text.hex, accent.hex, label, label, 3 if use_accent else 2)
