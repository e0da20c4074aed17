import os
import os.path


# Application identifiers
APP_ID = "moonphase"
APP_AUTHOR = "moonphase"


# Base directory of this package
_dir = os.path.dirname(os.path.abspath(__file__))

# Data file paths
DATA_DIR = os.path.join(_dir, "data")
TEXTURE_NAME = "fullMoon"
TEXTURE_EXTENSIONS = (".png", ".jpg", ".jpeg", ".tif", ".tiff", ".bmp", ".webp")


# Phase model
SYNODIC_PERIOD_DAYS = 29.530588861
SECONDS_PER_DAY = 86400.0
REFERENCE_EPOCH_ISO = "2001-01-01T00:00:00"


# Scene geometry
MOON_RADIUS = 1.0
LIGHT_DISTANCE = 10.0
CAMERA_POSITION = (0.0, 0.0, 3.0)
CAMERA_FIELD_OF_VIEW_DEG = 60.0
FLAT_MOON_GRAY = 0.85
MAX_EXPOSURE = 4.0


# Output
DEFAULT_SIZE = (512, 512)
FALLBACK_INSET_RATIO = 0.15
BACKGROUND_COLOR = (0, 0, 0)
FALLBACK_MOON_COLOR = (255, 255, 255)


# Observer location used when none is supplied: Kyoto City (lat, lon)
DEFAULT_LOCATION = (35.0116, 135.7681)
