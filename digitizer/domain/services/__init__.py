"""
Domain services for business logic that spans several page records.
"""
from .consistency_reconciler import ConsistencyReconciler, ReconciliationReport

__all__ = ["ConsistencyReconciler", "ReconciliationReport"]
