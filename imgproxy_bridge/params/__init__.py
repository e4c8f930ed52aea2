from .enums import GravityType, ResizeType, WatermarkPosition
from .builder import Gravity, Offset, Padding, ParamBuilder
from .grammar import KNOWN_OPERATIONS, validate_params

__all__ = [
    "GravityType",
    "ResizeType",
    "WatermarkPosition",
    "Gravity",
    "Offset",
    "Padding",
    "ParamBuilder",
    "KNOWN_OPERATIONS",
    "validate_params",
]
