"""Trade Journal — reconstruction, review and analytics.

Key components
--------------
reconstruct_trades    Zero-to-zero grouping of executions into trades
apply_equity_curve    Running equity over a collection
merge_selected        Fold several trades into one
compute_statistics    Headline metrics, breakdowns and combo mining
TradeFilter           Journal list filtering
TradeExporter         CSV/JSON trade export

Trade edits (annotations, tags, notes, chart image) live in
:mod:`edgelog.journal.annotations`.
"""

from .equity import apply_equity_curve, chronological, newest_first
from .export import TradeExporter
from .filters import TradeFilter
from .merge import MergeResult, combine_trades, merge_selected
from .reconstruct import classify_role, reconstruct_trades
from .stats import TradeStatistics, compute_statistics

__all__ = [
    "TradeExporter",
    "TradeFilter",
    "MergeResult",
    "TradeStatistics",
    "apply_equity_curve",
    "chronological",
    "classify_role",
    "combine_trades",
    "compute_statistics",
    "merge_selected",
    "newest_first",
    "reconstruct_trades",
]
