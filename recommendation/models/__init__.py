# Export all recommendation models for easy imports
from .base import Base
from .decision_log import RecDecisionLog

__all__ = [
    "Base",
    "RecDecisionLog",
]
