"""
app/services package marker.
"""

from app.services.aggregation_service import AggregationService
from app.services.csv_ingestion_service import (
    CSVHeaderValidationError,
    CSVIngestionService,
    IngestionResult,
    get_csv_ingestion_service,
    load_transactions,
)
from app.services.dashboard_orchestrator import DashboardOrchestrator, DashboardSnapshot
from app.services.discount_service import DiscountService
from app.services.export_service import DashboardExportService, ExportResult, to_csv
from app.services.filter_service import filter_records, toggle_drill_down
from app.services.ranking_service import RankingService, RankMode
from app.services.scorecard_service import ScorecardService, calculate_scorecard

__all__ = [
    "AggregationService",
    "CSVHeaderValidationError",
    "CSVIngestionService",
    "IngestionResult",
    "get_csv_ingestion_service",
    "load_transactions",
    "DashboardOrchestrator",
    "DashboardSnapshot",
    "DiscountService",
    "DashboardExportService",
    "ExportResult",
    "to_csv",
    "filter_records",
    "toggle_drill_down",
    "RankingService",
    "RankMode",
    "ScorecardService",
    "calculate_scorecard",
]
