"""
Chaining builder for imgproxy processing options.

Each method appends one token to the pipeline. Tokens are ``:``-joined fields
and the pipeline is rendered by :meth:`ParamBuilder.build` as a ``/``-joined
string, e.g.::

    ParamBuilder().resize(type=ResizeType.FILL, width=300).blur(2).build()
    # "resize:fill:300:0:false:false/blur:2"

See https://docs.imgproxy.net/usage/processing for the meaning of each option.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Set, Tuple, Union
from urllib.parse import quote

from .enums import GravityType, ResizeType, WatermarkPosition

logger = logging.getLogger("uvicorn.error")

ROTATION_ANGLES = (0, 90, 180, 270)


@dataclass(frozen=True)
class Offset:
    x: float
    y: float


@dataclass(frozen=True)
class Gravity:
    type: GravityType
    center: Optional[Offset] = None


@dataclass(frozen=True)
class Padding:
    top: Optional[int] = None
    right: Optional[int] = None
    bottom: Optional[int] = None
    left: Optional[int] = None


def format_value(value) -> str:
    """Render a single field the way imgproxy expects it in a URL."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, str):
        # Free text such as file names may hold separators or non-ASCII
        return quote(value, safe="")
    return str(value)


def _token(name: str, *fields) -> str:
    return ":".join([name, *(format_value(f) for f in fields)])


def _gravity_fields(gravity: Union[Gravity, GravityType, str, None]) -> list:
    # Trailing gravity fields are omitted rather than zero-filled
    if gravity is None:
        return []
    if not isinstance(gravity, Gravity):
        return [gravity]
    if gravity.center is None:
        return [gravity.type]
    return [gravity.type, gravity.center.x, gravity.center.y]


class ParamBuilder:
    """Accumulates processing options in application order."""

    def __init__(self):
        self._modifiers: List[str] = []
        self._applied: Set[str] = set()

    @property
    def modifiers(self) -> Tuple[str, ...]:
        return tuple(self._modifiers)

    def build(self) -> str:
        return "/".join(self._modifiers)

    def __str__(self) -> str:
        return self.build()

    def __repr__(self) -> str:
        return f"ParamBuilder({self.build()!r})"

    def _push(self, operation: str, token: str) -> "ParamBuilder":
        if operation in self._applied:
            logger.warning(
                f"[ParamBuilder] '{operation}' applied more than once, imgproxy uses the last value"
            )
        self._applied.add(operation)
        self._modifiers.append(token)
        return self

    def resize(
        self,
        type: Union[ResizeType, str, None] = None,
        width: Optional[int] = None,
        height: Optional[int] = None,
        enlarge: Optional[bool] = None,
        extend: Optional[bool] = None,
        gravity: Union[Gravity, GravityType, str, None] = None,
    ) -> "ParamBuilder":
        if all(v is None for v in (type, width, height, enlarge, extend, gravity)):
            return self._push("resize", _token("resize", ResizeType.FIT))

        return self._push(
            "resize",
            _token(
                "resize",
                type if type is not None else ResizeType.FIT,
                width or 0,
                height or 0,
                bool(enlarge),
                bool(extend),
                *_gravity_fields(gravity),
            ),
        )

    def crop(
        self,
        width: int,
        height: int,
        gravity: Union[Gravity, GravityType, str, None] = None,
    ) -> "ParamBuilder":
        return self._push(
            "crop", _token("crop", width, height, *_gravity_fields(gravity))
        )

    def pad(self, value: Union[int, float, Padding, dict]) -> "ParamBuilder":
        """
        Add padding around the image.

        A scalar pads all four sides. Per-side values fall back as follows:
        right and bottom use top, left uses right and then top.
        """
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            sides = (value, value, value, value)
        else:
            if isinstance(value, dict):
                value = Padding(**value)
            top = value.top if value.top is not None else 0
            right = value.right if value.right is not None else top
            bottom = value.bottom if value.bottom is not None else top
            left = value.left if value.left is not None else right
            sides = (top, right, bottom, left)

        return self._push("pad", _token("padding", *sides))

    def trim(
        self,
        threshold: float,
        color: str,
        equal_horizontal: bool = False,
        equal_vertical: bool = False,
    ) -> "ParamBuilder":
        return self._push(
            "trim",
            _token(
                "trim", threshold, color, bool(equal_horizontal), bool(equal_vertical)
            ),
        )

    def rotate(self, angle: int) -> "ParamBuilder":
        if angle not in ROTATION_ANGLES:
            raise ValueError(f"Rotation angle must be one of {ROTATION_ANGLES}, got {angle}")
        return self._push("rotate", _token("rot", angle))

    def set_quality(self, percentage: int) -> "ParamBuilder":
        return self._push("set_quality", _token("q", percentage))

    def set_max_bytes(self, megabytes: float) -> "ParamBuilder":
        return self._push("set_max_bytes", _token("mb", megabytes))

    def set_background(
        self, color: Union[str, Sequence[int]]
    ) -> "ParamBuilder":
        if isinstance(color, str):
            return self._push("set_background", _token("bg", color))
        if len(color) != 3:
            raise ValueError("Background color must be a hex string or an (r, g, b) triple")
        return self._push("set_background", _token("bg", *color))

    def set_dpr(self, value: float) -> "ParamBuilder":
        return self._push("set_dpr", _token("dpr", value))

    def add_watermark(
        self,
        opacity: float,
        position: Union[WatermarkPosition, str, None] = None,
        offset: Optional[Offset] = None,
        scale: Optional[float] = None,
    ) -> "ParamBuilder":
        return self._push(
            "add_watermark",
            _token(
                "wm",
                opacity,
                position if position is not None else WatermarkPosition.CENTER,
                offset.x if offset else 0,
                offset.y if offset else 0,
                scale or 0,
            ),
        )

    def blur(self, sigma: float) -> "ParamBuilder":
        return self._push("blur", _token("blur", sigma))

    def sharpen(self, sigma: float) -> "ParamBuilder":
        return self._push("sharpen", _token("sh", sigma))

    def format(self, name: str) -> "ParamBuilder":
        return self._push("format", _token("format", name))

    def strip_metadata(self) -> "ParamBuilder":
        return self._push("strip_metadata", _token("sm", 1))

    def strip_color_profile(self) -> "ParamBuilder":
        return self._push("strip_color_profile", _token("scp", 1))

    def auto_rotate(self) -> "ParamBuilder":
        return self._push("auto_rotate", _token("ar", 1))

    def set_filename(self, filename: str) -> "ParamBuilder":
        return self._push("set_filename", _token("fn", filename))

    def use_preset(self, presets: Union[str, Sequence[str]]) -> "ParamBuilder":
        if isinstance(presets, str):
            presets = [presets]
        return self._push("use_preset", _token("preset", *presets))

    def use_cache_buster(self, buster: str) -> "ParamBuilder":
        return self._push("use_cache_buster", _token("cb", buster))
