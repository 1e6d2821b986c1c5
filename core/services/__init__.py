from .circulation import CirculationEngine, is_overdue
from .reports import ReportingAggregator, Reports
from .catalog import CatalogService

__all__ = ['CirculationEngine', 'is_overdue', 'ReportingAggregator', 'Reports', 'CatalogService']
