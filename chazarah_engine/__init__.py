"""
CHAZARAH OBLIGATION ENGINE
Quarter partitioning and settlement of study obligations
"""

from .calculators import PeriodPartitioner, SettlementCalculator, partition
from .errors import InvalidSessionAssignment, QueryError
from .models import Obligation, ObligationReport, Payment, Quarter, QuarterSettlement, Session, Year
from .processor import ObligationAggregator, get_user_quarters
from .store import InMemoryRecordStore, RecordStore

__all__ = [
    'ObligationAggregator',
    'PeriodPartitioner',
    'SettlementCalculator',
    'RecordStore',
    'InMemoryRecordStore',
    'Year',
    'Obligation',
    'Session',
    'Payment',
    'Quarter',
    'QuarterSettlement',
    'ObligationReport',
    'QueryError',
    'InvalidSessionAssignment',
    'get_user_quarters',
    'partition',
]
