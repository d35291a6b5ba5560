"""Service facades wiring collaborator snapshots into the costing core."""

from .costing_service import CostingService, ProductNotFound, SyncResult
from .reporting import CommissionMismatch, MonthlyReports, ReportingService

__all__ = [
    "CommissionMismatch",
    "CostingService",
    "MonthlyReports",
    "ProductNotFound",
    "ReportingService",
    "SyncResult",
]
