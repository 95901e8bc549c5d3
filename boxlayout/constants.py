"""
constants.py — Grid-unit constants shared by every layout algorithm.

All geometry in this package is expressed in grid units. The editor converts
grid units to pixels elsewhere; nothing here knows about pixels.
"""

# =============================================================================
# MINIMUM DIMENSIONS
# =============================================================================

MIN_WIDTH = 5
MIN_HEIGHT = 3

# =============================================================================
# MARGINS
# =============================================================================

DEFAULT_MARGIN = 1.0          # Side/bottom spacing and gutter between siblings
DEFAULT_LABEL_MARGIN = 2.0    # Extra top spacing reserved for the parent label

# =============================================================================
# DEFAULT SIZES
# =============================================================================

DEFAULT_LEAF_WIDTH = 6
DEFAULT_LEAF_HEIGHT = 4

DEFAULT_ROOT_WIDTH = 16
DEFAULT_ROOT_HEIGHT = 10

# Text label metrics (font size is in points, result is in grid units)
DEFAULT_FONT_SIZE = 14
DEFAULT_LABEL_LENGTH = 5
TEXT_WIDTH_FACTOR = 0.6
TEXT_HEIGHT_FACTOR = 1.5

# Containers without children are sized from their label
CONTAINER_LABEL_FACTOR = 0.6
CONTAINER_LABEL_PADDING = 1
CONTAINER_MIN_LABEL_WIDTH = 2

# =============================================================================
# HIERARCHY
# =============================================================================

MAX_DEPTH_HOPS = 10
