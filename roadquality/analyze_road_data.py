"""
Road Quality Analysis Module

This module classifies road-pavement telemetry and aggregates it into the
statistics, directory and map views of the road quality dashboard.

It re-exports the functions of the individual modules so callers can import
everything from one place.
"""

# Import constants
from .constants import (
    DATA_DIR,
    DEFAULT_DATA_FILE,
    CLASS_COLORS,
    PCI_CLASSES,
)

# Import utility functions
from .utils import (
    safe_float,
    round_float,
    kmh_to_mps,
)

# Import normalization functions
from .normalizer import (
    RawShape,
    SegmentRecord,
    make_road_key,
    detect_shape,
    normalize_entries,
)

# Import data loading functions
from .data_loading import (
    RoadDataSnapshot,
    load_raw_dump,
    load_snapshot,
)

# Import classification functions
from .classifier import (
    ScoringMode,
    ErrorKind,
    ClassificationError,
    VelocityProfile,
    VELOCITY_PROFILES,
    get_profile,
    classify,
    classify_velocity,
)

# Import aggregation functions
from .aggregation import (
    ClassBucket,
    SelectedRoadSummary,
    build_class_buckets,
    build_user_class_tables,
    selected_road_rows,
    summarize_selected_roads,
)

# Import directory functions
from .directory import (
    SortKey,
    SortDirection,
    SearchField,
    SortSpec,
    SearchSpec,
    DirectoryEntry,
    build_directory,
    directory_view,
)

# Import state classes
from .selection import (
    SelectionState,
    DashboardState,
)

# Import map output functions
from .rendering import (
    build_segment_styles,
    segments_to_geojson,
)

# Import export functions
from .export import (
    export_class_buckets_csv,
    export_selected_summary_csv,
)

# Import dashboard builder functions
from .session import (
    build_dashboard_payload,
    build_directory_rows,
)
