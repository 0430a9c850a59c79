# =============================================================================
# core/access/ - Row-Level Access Control
# =============================================================================
# - policies.py: Requester, Role, Operation and the per-table rules
# - evaluator.py: AccessEvaluator and the privileged AdminCheck
# =============================================================================

from .evaluator import AccessEvaluator, AdminCheck
from .policies import (
    POLICIES,
    Operation,
    PolicyContext,
    Requester,
    Role,
    TablePolicy,
)

__all__ = [
    "AccessEvaluator",
    "AdminCheck",
    "POLICIES",
    "Operation",
    "PolicyContext",
    "Requester",
    "Role",
    "TablePolicy",
]
