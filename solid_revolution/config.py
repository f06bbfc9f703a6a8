"""
Built-in defaults for solid_revolution.

Values here are only defaults: every mesh/measurement request receives an
explicit ResolutionConfig (see project_config.py), and project files can
override these through .revolve.json.
"""

# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------

# Number of x-segments used for display sampling and the continuous lathe
DEFAULT_X_SEGMENTS = 100

# Angular steps of the lathe sweep (per full requested angle)
DEFAULT_ANGULAR_SEGMENTS = 64

# Number of slabs in the discrete-disk (Riemann sum) visualization
DEFAULT_DISK_COUNT = 10

# Sub-intervals used by the quadrature engine
DEFAULT_QUADRATURE_INTERVALS = 1000

STRATEGY_CONTINUOUS = "continuous"
STRATEGY_DISKS = "disks"
STRATEGIES = (STRATEGY_CONTINUOUS, STRATEGY_DISKS)

# ---------------------------------------------------------------------------
# Tolerances
# ---------------------------------------------------------------------------

# Bounds closer than this are separated: b = a + BOUND_TOLERANCE
BOUND_TOLERANCE = 1e-2

# Radius (or wall thickness) at or below this value is treated as zero
RADIUS_EPSILON = 1e-9

# Deepest formula tree (nesting and operator chains) the parser accepts
MAX_FORMULA_DEPTH = 100

# ---------------------------------------------------------------------------
# Revolution angle
# ---------------------------------------------------------------------------

MIN_ANGLE_DEG = 0.0
MAX_ANGLE_DEG = 360.0
DEFAULT_ANGLE_DEG = 360.0

# ---------------------------------------------------------------------------
# Curve groups
# ---------------------------------------------------------------------------

GROUP_UPPER = "upper"
GROUP_LOWER = "lower"
