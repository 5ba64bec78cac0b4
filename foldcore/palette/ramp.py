"""
Four-level colour ramp for multi-colour pieces: one colour per density level,
derived from the palette's background and text colours.
"""
from ..random_utils import derive_channel
from ..traits.channels import CHANNEL_LEVEL_RAMP
from .colors import has_good_contrast
from .table import ColorEntry, ColorTable, default_table

RAMP_LEVELS = 4


def _quartiles(path: list[ColorEntry]) -> list[str]:
    n = len(path)
    return [path[0].hex, path[int(n * 0.33)].hex, path[int(n * 0.66)].hex, path[-1].hex]


def generate_level_ramp(
    seed: int, bg_hex: str, text_hex: str, table: ColorTable | None = None
) -> list[str]:
    """
    Four hex colours, level 0 -> level 3. Three strategies:
    cube diagonal from ground to text (45%), neighbour ladder around text (30%),
    temperature split (25%).
    """
    table = table or default_table()
    rng = derive_channel(seed, CHANNEL_LEVEL_RAMP)
    bg = table.find(bg_hex)
    text = table.find(text_hex)
    light_bg = bg.luminance > 50

    def by_value(c: ColorEntry) -> float:
        return -c.luminance if light_bg else c.luminance

    strategy = rng.roll()

    if strategy < 4500:
        if bg.cube_pos is not None and text.cube_pos is not None:
            path = table.cube_diagonal_path(bg, text, 6)
            if len(path) >= RAMP_LEVELS:
                return _quartiles(path)
        return _quartiles(table.interpolate_by_luminance(bg, text, 6))

    if strategy < 7500:
        ladders = [
            sorted((c for c in table.cube_neighbors(text, steps) if has_good_contrast(bg, c, ratio)), key=by_value)
            for steps, ratio in ((1, 2.0), (2, 3.0), (3, 4.0))
        ]
        colors = [text.hex]
        colors.append(rng.pick(ladders[0]).hex if ladders[0] else text.hex)
        if ladders[1]:
            unused = [c for c in ladders[1] if c.hex not in colors]
            colors.append(rng.pick(unused).hex if unused else ladders[1][0].hex)
        else:
            colors.append(colors[1])
        if ladders[2]:
            unused = [c for c in ladders[2] if c.hex not in colors]
            colors.append(rng.pick(unused).hex if unused else ladders[2][0].hex)
        else:
            colors.append(text.hex)
        return [c.hex for c in sorted((table.find(h) for h in colors), key=by_value)]

    opposite = {"warm": "cool", "cool": "warm"}.get(text.temperature, "warm")
    same_temp = sorted(
        (c for c in table.by_temperature[text.temperature] if has_good_contrast(bg, c, 2.5)), key=by_value
    )
    opp_temp = sorted(
        (c for c in table.by_temperature[opposite] if has_good_contrast(bg, c, 2.5)), key=by_value
    )
    colors = [same_temp[0].hex if same_temp else text.hex]
    mid1 = [c for c in same_temp if c.hex not in colors]
    colors.append(mid1[int(len(mid1) * 0.3)].hex if mid1 else text.hex)
    mid2 = [c for c in opp_temp if c.hex not in colors]
    colors.append(mid2[int(len(mid2) * 0.5)].hex if mid2 else text.hex)
    final = sorted((c for c in same_temp + opp_temp if c.hex not in colors), key=by_value)
    colors.append(final[-1].hex if final else text.hex)
    return colors
