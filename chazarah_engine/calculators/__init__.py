"""
Calculators Package

Provides the partitioning and settlement components of the obligation engine.
"""

from .partition import PeriodPartitioner, partition
from .settlement import SettlementCalculator, quantize_money

__all__ = [
    "PeriodPartitioner",
    "SettlementCalculator",
    "partition",
    "quantize_money",
]
