"""Utilities for the commitment engine."""

from .utils import (
    setup_logging,
    save_results,
    PerformanceMonitor,
    create_performance_report,
    get_system_info,
    to_serializable,
)

__all__ = [
    'setup_logging',
    'save_results',
    'PerformanceMonitor',
    'create_performance_report',
    'get_system_info',
    'to_serializable',
]
