"""
Middleware package for the Realty Staff API.
"""

from .performance import PerformanceMonitoringMiddleware

__all__ = ["PerformanceMonitoringMiddleware"]
