from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING

import webcolors
from PIL import Image, ImageDraw, ImageFont

from .models import CycleResult, Person, VisualizationPalette

if TYPE_CHECKING:
    from PIL import ImageFont as ImageFontModule

type RGB = tuple[int, int, int]

_FALLBACK_COLOR: RGB = (211, 211, 211)  # lightgray


def _hex_to_rgb(value: str) -> RGB:
    value = value.strip().lstrip("#")
    if len(value) != 6:
        raise ValueError(f"Invalid color value '{value}'. Use 6-character hex (e.g. #F28B82).")
    return tuple(int(value[i : i + 2], 16) for i in range(0, 6, 2))  # type: ignore[return-value]


def _resolve_color_value(value: str | RGB) -> RGB:
    """Resolve a color value from CSS3 named color, hex string, or RGB tuple.

    Underscored preset names such as ``light_blue`` map to their CSS3 spelling.
    """
    if isinstance(value, tuple):
        return value

    try:
        rgb = webcolors.name_to_rgb(value.lower().replace("_", ""))
        return (rgb.red, rgb.green, rgb.blue)
    except ValueError:
        # Not a named color, treat as hex string
        return _hex_to_rgb(value)


def person_colors(roster: Sequence[Person], palette: VisualizationPalette) -> dict[str, RGB]:
    """Assign each person a color: explicit override first, then the rotation in roster order."""
    out: dict[str, RGB] = {}
    rotation = palette.rotation or []
    for i, person in enumerate(roster):
        if person.name in palette.people:
            out[person.name] = _resolve_color_value(palette.people[person.name])
        elif rotation:
            out[person.name] = _resolve_color_value(rotation[i % len(rotation)])
        else:
            out[person.name] = _FALLBACK_COLOR
    return out


def _get_text_color(bg_color: RGB) -> str:
    """
    Determine text color (black or white) based on background luminance.
    Uses relative luminance formula from WCAG 2.0.
    """
    r, g, b = bg_color
    luminance = (0.299 * r + 0.587 * g + 0.114 * b) / 255
    return "white" if luminance < 0.5 else "black"


def _load_fonts() -> tuple[ImageFontModule.ImageFont | ImageFontModule.FreeTypeFont, ImageFontModule.ImageFont | ImageFontModule.FreeTypeFont]:
    font_options = [
        "/System/Library/Fonts/Supplemental/Arial Bold.ttf",
        "/Library/Fonts/Arial Bold.ttf",
        "DejaVuSans-Bold.ttf",
        "Arial-Bold.ttf",
        "DejaVuSans.ttf",
    ]
    for font_path in font_options:
        try:
            return ImageFont.truetype(font_path, 26), ImageFont.truetype(font_path, 18)
        except OSError:
            continue
    return ImageFont.load_default(), ImageFont.load_default()


def _text_size(font: ImageFontModule.ImageFont | ImageFontModule.FreeTypeFont, text: str) -> tuple[int, int]:
    bbox = font.getbbox(text)
    return int(bbox[2] - bbox[0]), int(bbox[3] - bbox[1])


def render_cycle_image(
    result: CycleResult,
    roster: Sequence[Person],
    out_path: Path,
    palette: VisualizationPalette | None = None,
) -> Path:
    """
    Render a PNG grid of the cycle: one row per person, one column per week.

    Each cell lists the person's chores for that week followed by the count and
    load. Cells whose count falls outside the policy bounds get a thick outline
    in the palette's violation color.

    Args:
        result: Allocation produced by `allocate`
        roster: People in display order
        out_path: File path to write the PNG image
        palette: Optional color palette (defaults to `VisualizationPalette()`)

    Returns:
        Path to the written PNG file.
    """
    if not result.weeks or not roster:
        raise ValueError("Nothing to render: the cycle has no weeks or the roster is empty.")

    palette = palette or VisualizationPalette()
    colors = person_colors(roster, palette)
    violation = _resolve_color_value(palette.violation)
    lo, hi = result.policy.min_per_week, result.policy.max_per_week

    header_font, cell_font = _load_fonts()
    line_h = _text_size(cell_font, "Hg")[1] + 6

    # Tallest cell decides the row height
    max_lines = max(len(w.for_person(p.name)) for w in result.weeks for p in roster) + 1
    cell_w = 280
    cell_h = max(120, 30 + max_lines * line_h)
    left_margin = 200
    top_margin = 100
    padding = 40

    width = left_margin + len(result.weeks) * cell_w + padding
    height = top_margin + len(roster) * cell_h + padding

    image = Image.new("RGB", (width, height), "white")
    draw = ImageDraw.Draw(image)

    def _draw_text_center(text: str, x: int, y: int) -> None:
        tw, th = _text_size(header_font, text)
        draw.text((x - tw // 2, y - th // 2), text, fill="black", font=header_font)

    for col, week in enumerate(result.weeks):
        _draw_text_center(f"Week {week.week}", left_margin + col * cell_w + cell_w // 2, top_margin // 2)

    for row, person in enumerate(roster):
        y0 = top_margin + row * cell_h
        _draw_text_center(person.name, left_margin // 2, y0 + cell_h // 2)
        fill = colors[person.name]
        text_color = _get_text_color(fill)

        for col, week in enumerate(result.weeks):
            x0 = left_margin + col * cell_w
            rect = (x0, y0, x0 + cell_w, y0 + cell_h)
            count = week.counts.get(person.name, 0)
            out_of_bounds = count < lo or count > hi
            draw.rectangle(rect, fill=fill, outline=violation if out_of_bounds else "black", width=6 if out_of_bounds else 2)

            lines = [a.chore_name + (" *" if a.shared else "") for a in week.for_person(person.name)]
            lines.append(f"{count} chores / load {week.loads.get(person.name, 0)}")
            for i, line in enumerate(lines):
                draw.text((x0 + 12, y0 + 12 + i * line_h), line, fill=text_color, font=cell_font)

    out_path.parent.mkdir(parents=True, exist_ok=True)
    image.save(out_path, format="PNG")
    return out_path
