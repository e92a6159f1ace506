from .cache import ProjectSnapshotCache
from .models import ProjectFinanceSnapshot
from .service import FinanceService

__all__ = [
    "FinanceService",
    "ProjectFinanceSnapshot",
    "ProjectSnapshotCache",
]
