from enum import Enum


class GravityType(str, Enum):
    """Gravity values understood by imgproxy's resize and crop options."""

    NORTH = "no"
    SOUTH = "so"
    EAST = "ea"
    WEST = "we"
    NORTHEAST = "noea"
    NORTHWEST = "nowe"
    SOUTHEAST = "soea"
    SOUTHWEST = "sowe"
    CENTER = "center"


class ResizeType(str, Enum):
    FIT = "fit"
    FILL = "fill"
    FILL_DOWN = "fill-down"
    FORCE = "force"
    AUTO = "auto"


class WatermarkPosition(str, Enum):
    CENTER = "ce"
    NORTH = "no"
    SOUTH = "so"
    EAST = "ea"
    WEST = "we"
    NORTH_EAST = "noea"
    NORTH_WEST = "nowe"
    SOUTH_EAST = "soea"
    SOUTH_WEST = "sowe"
    REPLICATE = "re"
