from watch_match.models.analysis_comparison import AnalysisComparison
from watch_match.models.base import Base
from watch_match.models.reference_watch import ReferenceWatchRecord

__all__ = [
    "AnalysisComparison",
    "Base",
    "ReferenceWatchRecord",
]
