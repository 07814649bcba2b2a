"""
Recommendation Engine Constants

Canonical certificate vocabulary, catalog defaults and payment defaults.
All values are deterministic with no AI/ML components.
"""

from enum import Enum
from typing import List, Set

# =============================================================================
# CERTIFICATE VOCABULARY
# =============================================================================

# Canonical label every CNA/NAT spelling is folded into
NURSING_ASSISTANT_TRAINING = "nursing assistant training"

# Substrings (not whole words) that identify a CNA/NAT goal
CNA_SYNONYMS: List[str] = [
    "cna",
    "nat",
    "nursing assistant",
    "nursing assistant training",
    "certified nursing assistant",
]

# Track that is never recommended automatically - always routed to staff
CMA_MARKER = "clinical medical assistant"


# =============================================================================
# MATCH TYPES
# =============================================================================

class MatchType(str, Enum):
    """How the recommended course list was produced."""
    PERFECT = "perfect"              # Exact certificate-set equality
    FALLBACK = "fallback"            # Greedy cover or most comprehensive course
    STAFF_HANDOFF = "staff_handoff"  # Escalated to a human, no courses
    NONE = "none"                    # Empty catalog


# =============================================================================
# CATALOG DEFAULTS
# =============================================================================

DEFAULT_PRIORITY = 999
DEFAULT_MAX_COURSES = 3

# Boolean-ish tokens accepted in spreadsheet cells
TRUTHY_TOKENS: Set[str] = {"true", "yes", "y", "1", "x", "✓"}

BIWEEKLY_TOKENS: Set[str] = {"biweekly", "bi-weekly", "bi weekly", "every 2 weeks", "every two weeks"}


# =============================================================================
# PAYMENT DEFAULTS
# =============================================================================

DEFAULT_PLAN_LENGTH_WEEKS = 10
DEFAULT_DOWN_PAYMENT_PERCENT = 10.0
DEFAULT_PIF_DISCOUNT_AMOUNT = 100


# =============================================================================
# SCHEDULE SELECTION
# =============================================================================

MAX_SCHEDULE_OPTIONS = 2

# Fallback formats for a separate date + time-of-day pair
SCHEDULE_DATETIME_FORMATS: List[str] = [
    "%Y-%m-%d %I:%M %p",
    "%Y-%m-%d %I:%M%p",
    "%Y-%m-%d %I %p",
    "%m/%d/%Y %H:%M",
    "%m/%d/%Y %I:%M %p",
]

WEEKDAYS: List[str] = [
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
]
