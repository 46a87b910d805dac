"""
Outcomes of an assignment attempt.

NoOfficersAvailable and AssignmentSkipped are ordinary results, not errors:
the case stays CREATED and can be retried or assigned by hand.
"""

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class Assigned:
    case_id: Any
    officer_id: Any
    officer_code: str
    distance_km: float
    station_id: Optional[Any] = None
    status_log: Any = field(default=None, compare=False, repr=False)

    assigned = True


@dataclass(frozen=True)
class NoOfficersAvailable:
    case_id: Any
    reason: str = 'No officers available within range'

    assigned = False


@dataclass(frozen=True)
class AssignmentSkipped:
    case_id: Any
    reason: str = 'Auto-assignment is disabled'

    assigned = False


@dataclass(frozen=True)
class Reassigned:
    case_id: Any
    officer_id: Any
    previous_officer_id: Optional[Any]
    status_log: Any = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class Candidate:
    """An officer the engine is about to try, with how it was chosen."""
    officer_id: Any
    officer_code: str
    distance_km: float
    station_id: Optional[Any] = None
    station_name: str = ''
