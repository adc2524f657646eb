"""Task catalog and completion settlement."""

from taskreward.tasks.catalog import TaskCatalog
from taskreward.tasks.settlement import SettlementResult, SettlementService, SettlementState

__all__ = ["TaskCatalog", "SettlementResult", "SettlementService", "SettlementState"]
