import warnings
import zlib
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from functools import cached_property
from typing import Any

import numpy as np
from cmap import Color, Colormap
from numpy.typing import NDArray

# Categorical palette used for point types without an explicit style.
DEFAULT_PALETTE = "tab20"
NO_STROKE = "none"


def color_hex(value: Any) -> str:
    """
    Normalize any color accepted by `cmap.Color` ("red", "#f00", rgba tuples)
    into a hex string. The SVG keyword "none" is passed through.
    """
    if isinstance(value, str) and value.strip().lower() == NO_STROKE:
        return NO_STROKE
    return Color(value).hex


@dataclass(frozen=True)
class TypeStyle:
    """Explicit fill and stroke for every point of a given `type`."""

    type: str | None
    color: str | None = None
    stroke: str | None = None

    @staticmethod
    def from_mapping(record: Mapping[str, Any]) -> "TypeStyle":
        if "type" not in record:
            raise KeyError(f"Type style requires a 'type' field: {record!r}")
        color = record.get("color")
        stroke = record.get("stroke")
        return TypeStyle(
            record["type"],
            None if color is None else color_hex(color),
            None if stroke is None else color_hex(stroke),
        )


class StyleLookup:
    """
    Resolve the fill and stroke of a point from its `type`.

    Explicit `TypeStyle` entries win. Types without one are filled from a
    categorical palette, indexed by a CRC32 of the type name so the same type
    gets the same color in every process, and are drawn without a stroke.
    """

    styles: dict[str | None, TypeStyle]
    palette: str

    def __init__(
        self,
        styles: Iterable[TypeStyle | Mapping[str, Any]] = (),
        palette: str = DEFAULT_PALETTE,
    ):
        self.styles = dict()
        self.palette = palette
        for style in styles:
            if not isinstance(style, TypeStyle):
                style = TypeStyle.from_mapping(style)
            if style.type in self.styles:
                warnings.warn(
                    f"Duplicate style for type {style.type!r}, keeping the first"
                )
                continue
            self.styles[style.type] = style

    @cached_property
    def colors(self) -> NDArray[np.float64]:
        colormap = Colormap(self.palette)
        return np.asarray(colormap.color_stops.color_array, dtype=np.float64)

    def palette_index(self, type: str | None) -> int:
        return zlib.crc32(str(type).encode("utf-8")) % len(self.colors)

    def fill(self, type: str | None) -> str:
        style = self.styles.get(type)
        if style is not None and style.color is not None:
            return style.color
        return Color(self.colors[self.palette_index(type)]).hex

    def stroke(self, type: str | None) -> str:
        style = self.styles.get(type)
        if style is not None and style.stroke is not None:
            return style.stroke
        return NO_STROKE

