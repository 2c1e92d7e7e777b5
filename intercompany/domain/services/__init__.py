"""
Domain Services - Aggregation, allocation and reporting over month contexts.
"""

from .availability_aggregator import AvailabilityAggregator
from .ratio_calculator import RatioCalculator
from .gl_aggregator import GLAggregator
from .lump_sum_aggregator import LumpSumAggregator
from .staff_baseline_calculator import StaffBaselineCalculator
from .allocation_engine import AllocationEngine
from .context_builder import MonthContextBuilder, FiscalYearContextBuilder
from .distribution_service import ExpenseDistributionService
from .internal_service_charges import InternalServiceCharges

__all__ = [
    'AvailabilityAggregator',
    'RatioCalculator',
    'GLAggregator',
    'LumpSumAggregator',
    'StaffBaselineCalculator',
    'AllocationEngine',
    'MonthContextBuilder',
    'FiscalYearContextBuilder',
    'ExpenseDistributionService',
    'InternalServiceCharges',
]
