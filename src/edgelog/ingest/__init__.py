"""Broker export ingestion.

Key components
--------------
import_text       Detect, normalize and reconstruct a CSV export
import_mapped     Same, through a user-supplied column mapping
detect_format     Classify CSV text into a typed format
ColumnMapping     Canonical field -> source column choices
load_snapshot     Trusted full-state JSON import
dump_snapshot     Full-state JSON export
"""

from .detect import DetectedFormat, detect_format
from .mapping import ColumnMapping, resolve_mapping
from .pipeline import ImportResult, import_mapped, import_text
from .snapshot import JournalSnapshot, dump_snapshot, load_snapshot

__all__ = [
    "ColumnMapping",
    "DetectedFormat",
    "ImportResult",
    "JournalSnapshot",
    "detect_format",
    "dump_snapshot",
    "import_mapped",
    "import_text",
    "load_snapshot",
    "resolve_mapping",
]
