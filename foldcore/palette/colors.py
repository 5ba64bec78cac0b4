"""
Pure colour algorithms: luminance, temperature, saturation tier, contrast, HSL.
Floating point is fine here; nothing in this module decides a trait label.
"""
import math


def rgb_to_hex(r: int, g: int, b: int) -> str:
    return f"#{r:02X}{g:02X}{b:02X}"


def hex_to_rgb(hex_color: str) -> tuple[int, int, int]:
    h = hex_color.lstrip("#")
    if len(h) != 6:
        raise ValueError(f"Expected #RRGGBB, got {hex_color!r}")
    return int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16)


def luminance(r: int, g: int, b: int) -> float:
    """ITU-R BT.709 weighted luminance, 0-100."""
    return (0.2126 * r / 255 + 0.7152 * g / 255 + 0.0722 * b / 255) * 100


def temperature(r: int, g: int, b: int) -> str:
    """warm | cool | neutral (near-gray colours are neutral)."""
    warmth = r - b
    if abs(warmth) < 30 and abs(r - g) < 30 and abs(g - b) < 30:
        return "neutral"
    return "warm" if warmth > 0 else "cool"


def saturation_tier(r: int, g: int, b: int) -> str:
    """gray | muted | chromatic | vivid by channel spread."""
    delta = max(r, g, b) - min(r, g, b)
    if delta < 20:
        return "gray"
    if delta < 80:
        return "muted"
    if delta < 160:
        return "chromatic"
    return "vivid"


def contrast_ratio(lum1: float, lum2: float) -> float:
    """WCAG-style ratio from 0-100 luminances."""
    l1, l2 = lum1 / 100, lum2 / 100
    return (max(l1, l2) + 0.05) / (min(l1, l2) + 0.05)


def has_good_contrast(c1, c2, min_ratio: float = 4.5) -> bool:
    """c1/c2 are ColorEntry-like (have .luminance)."""
    return contrast_ratio(c1.luminance, c2.luminance) >= min_ratio


def color_distance(c1, c2) -> float:
    """Perceptually weighted RGB distance."""
    dr, dg, db = c1.r - c2.r, c1.g - c2.g, c1.b - c2.b
    return math.sqrt(dr * dr * 0.3 + dg * dg * 0.59 + db * db * 0.11)


def hex_to_hsl(hex_color: str) -> tuple[float, float, float]:
    """(hue 0-360, saturation 0-100, lightness 0-100)."""
    r, g, b = (c / 255 for c in hex_to_rgb(hex_color))
    cmax, cmin = max(r, g, b), min(r, g, b)
    light = (cmax + cmin) / 2
    if cmax == cmin:
        return 0.0, 0.0, light * 100
    d = cmax - cmin
    sat = d / (2 - cmax - cmin) if light > 0.5 else d / (cmax + cmin)
    if cmax == r:
        hue = (g - b) / d + (6 if g < b else 0)
    elif cmax == g:
        hue = (b - r) / d + 2
    else:
        hue = (r - g) / d + 4
    return hue * 60, sat * 100, light * 100


def hsl_to_hex(h: float, s: float, l: float) -> str:
    s /= 100
    l /= 100
    a = s * min(l, 1 - l)

    def channel(n: int) -> int:
        k = (n + h / 30) % 12
        value = l - a * max(min(k - 3, 9 - k, 1), -1)
        return max(0, min(255, round(255 * value)))

    return rgb_to_hex(channel(0), channel(8), channel(4))


def shift_hue(hex_color: str, degrees: float, *, sat_boost: float = 20, light_boost: float = 10) -> str:
    """Rotate hue and lift saturation/lightness (used for extreme-weight cells)."""
    h, s, l = hex_to_hsl(hex_color)
    return hsl_to_hex((h + degrees + 360) % 360, min(100, s + sat_boost), min(85, l + light_boost))
