"""
Assignment engine.

Matches an SOS case to the nearest available officer and commits the match
atomically:

1. Rank active stations by distance from the case (or, when no stations
   exist, rank every AVAILABLE officer with a known position).
2. Walk candidates nearest first, stopping at the configured radius.
3. Commit {case.officer, case ASSIGNED, officer BUSY, status log row} in one
   transaction. The officer is flipped with a conditional AVAILABLE -> BUSY
   update, so two concurrent commits can never book the same officer; the
   loser rolls back and moves on to its next candidate.

Ranking reads are not synchronized. Staleness there only changes which
officer is tried first, never what gets committed.
"""

import logging
from dataclasses import dataclass
from datetime import timedelta

from django.conf import settings
from django.db import DEFAULT_DB_ALIAS, transaction
from django.utils import timezone

from cases.models import SYSTEM_ACTOR, CaseStatus, CaseStatusLog, SOSCase
from cases.state_machine import CaseStateMachine
from core.exceptions import ConcurrencyConflict, NotFound, PreconditionFailed
from responders.models import Officer, OfficerStatus, Station

from .geo import Coordinate, Ranked, distance_km, rank_by_distance
from .results import (
    Assigned, AssignmentSkipped, Candidate, NoOfficersAvailable, Reassigned,
)

logger = logging.getLogger('saathi.dispatch')

OFFICER_FIELDS = (
    'id', 'officer_code', 'status', 'current_lat', 'current_lng',
    'last_location_update', 'station_id',
)


class CaseAlreadyAssigned(Exception):
    """The case picked up an officer between ranking and commit."""


@dataclass(frozen=True)
class AssignmentConfig:
    auto_assign_enabled: bool = True
    max_distance_km: float = 10.0
    max_commit_attempts: int = 3
    location_stale_after: timedelta = timedelta(minutes=30)
    using: str = DEFAULT_DB_ALIAS

    @classmethod
    def from_settings(cls, **overrides):
        conf = settings.OFFICER_ASSIGNMENT
        values = dict(
            auto_assign_enabled=conf['AUTO_ASSIGN_ENABLED'],
            max_distance_km=float(conf['MAX_DISTANCE_KM']),
            max_commit_attempts=conf.get('MAX_COMMIT_ATTEMPTS', 3),
            location_stale_after=timedelta(minutes=conf.get('LOCATION_STALE_MINUTES', 30)),
        )
        values.update(overrides)
        return cls(**values)


def officer_position(officer):
    return Coordinate(officer['current_lat'], officer['current_lng'])


class AssignmentEngine:
    """
    Selects and reserves responders for SOS cases.

    Each call owns its own state; one engine can be shared between
    requests.
    """

    def __init__(self, config=None):
        self.config = config or AssignmentConfig.from_settings()
        self.db = self.config.using

    # =========================================================================
    # AUTO ASSIGNMENT
    # =========================================================================

    def auto_assign(self, case_id, location):
        """
        Assign the nearest available officer to a CREATED case.

        Returns Assigned, NoOfficersAvailable or AssignmentSkipped.
        Raises NotFound for an unknown case; any database error propagates
        with nothing written.
        """
        if not self.config.auto_assign_enabled:
            logger.info(f"Auto-assignment is disabled, skipping case {case_id}")
            return AssignmentSkipped(case_id)

        if not SOSCase.objects.using(self.db).filter(pk=case_id).exists():
            raise NotFound("Case not found")

        location = Coordinate(*location)
        conflicts = 0

        for candidate in self.candidates(location):
            try:
                return self._commit(case_id, candidate)
            except ConcurrencyConflict:
                conflicts += 1
                logger.warning(
                    f"Officer {candidate.officer_code} was taken before commit "
                    f"(attempt {conflicts}/{self.config.max_commit_attempts}) for case {case_id}"
                )
                if conflicts >= self.config.max_commit_attempts:
                    return NoOfficersAvailable(
                        case_id, reason='Every candidate was taken by a concurrent assignment'
                    )
            except CaseAlreadyAssigned:
                logger.info(f"Case {case_id} already has an officer, skipping auto-assignment")
                return AssignmentSkipped(case_id, reason='Case already has an officer assigned')

        logger.warning(
            f"No officers found within {self.config.max_distance_km}km for case {case_id}"
        )
        return NoOfficersAvailable(case_id)

    def candidates(self, location):
        """
        Yield officers to try, best first.

        Station mode is used whenever at least one active station exists;
        otherwise every AVAILABLE officer with a known position is ranked
        directly.
        """
        stations = list(
            Station.objects.using(self.db)
            .filter(is_active=True)
            .values('id', 'name', 'latitude', 'longitude')
        )
        if stations:
            return self._station_candidates(location, stations)
        return self._fallback_candidates(location)

    def _station_candidates(self, location, stations):
        for ranked_station in rank_by_distance(location, stations):
            if ranked_station.distance_km > self.config.max_distance_km:
                break

            station = ranked_station.item
            officers = self._available_officers(station_id=station['id'])
            if not officers:
                logger.debug(f"Station {station['name']} has no available officers")
                continue

            for ranked in self._rank_station_officers(location, officers, ranked_station.distance_km):
                yield Candidate(
                    officer_id=ranked.item['id'],
                    officer_code=ranked.item['officer_code'],
                    distance_km=ranked.distance_km,
                    station_id=station['id'],
                    station_name=station['name'],
                )

    def _fallback_candidates(self, location):
        officers = self._available_officers(with_position=True)
        for ranked in rank_by_distance(location, officers, locate=officer_position):
            if ranked.distance_km > self.config.max_distance_km:
                break
            yield Candidate(
                officer_id=ranked.item['id'],
                officer_code=ranked.item['officer_code'],
                distance_km=ranked.distance_km,
                station_id=ranked.item['station_id'],
            )

    def _available_officers(self, station_id=None, with_position=False):
        qs = Officer.objects.using(self.db).filter(status=OfficerStatus.AVAILABLE)
        if station_id is not None:
            qs = qs.filter(station_id=station_id)
        if with_position:
            qs = qs.filter(current_lat__isnull=False, current_lng__isnull=False)
        return list(qs.order_by('officer_code').values(*OFFICER_FIELDS))

    def _has_live_position(self, officer, now):
        if officer['current_lat'] is None or officer['current_lng'] is None:
            return False
        fix = officer['last_location_update']
        return fix is not None and now - fix <= self.config.location_stale_after

    def _rank_station_officers(self, location, officers, station_distance):
        """Rank a station's officers; stale or unknown positions count as the station's distance."""
        now = timezone.now()
        ranked = []
        for officer in officers:
            if self._has_live_position(officer, now):
                distance = distance_km(location, officer_position(officer))
            else:
                distance = station_distance
            ranked.append(Ranked(officer, distance))
        ranked.sort(key=lambda r: r.distance_km)
        return ranked

    def _commit(self, case_id, candidate):
        now = timezone.now()

        with transaction.atomic(using=self.db):
            case = self._lock_case(case_id)
            if case.officer_id is not None:
                raise CaseAlreadyAssigned(case_id)

            CaseStateMachine.validate_transition(case.status, CaseStatus.ASSIGNED)

            taken = (
                Officer.objects.using(self.db)
                .filter(pk=candidate.officer_id, status=OfficerStatus.AVAILABLE)
                .update(status=OfficerStatus.BUSY, updated_at=now)
            )
            if not taken:
                raise ConcurrencyConflict(f"Officer {candidate.officer_code} is no longer available")

            claimed = (
                SOSCase.objects.using(self.db)
                .filter(pk=case_id, officer__isnull=True, status=case.status)
                .update(
                    officer_id=candidate.officer_id,
                    status=CaseStatus.ASSIGNED,
                    assigned_at=now,
                    assigned_by=SYSTEM_ACTOR,
                    updated_at=now,
                )
            )
            if not claimed:
                raise CaseAlreadyAssigned(case_id)

            entry = CaseStatusLog.objects.using(self.db).create(
                case_id=case_id,
                from_status=case.status,
                to_status=CaseStatus.ASSIGNED,
                changed_by=SYSTEM_ACTOR,
                notes=self._assignment_note(candidate),
                timestamp=now,
            )

        logger.info(
            f"Auto-assigned officer {candidate.officer_code} "
            f"({candidate.distance_km:.2f}km away) to case {case.case_number}"
        )
        return Assigned(
            case_id=case_id,
            officer_id=candidate.officer_id,
            officer_code=candidate.officer_code,
            distance_km=candidate.distance_km,
            station_id=candidate.station_id,
            status_log=entry,
        )

    @staticmethod
    def _assignment_note(candidate):
        station = f" from {candidate.station_name}" if candidate.station_name else ''
        return (
            f"Auto-assigned to {candidate.officer_code}{station} "
            f"({candidate.distance_km:.2f}km away)"
        )

    def _lock_case(self, case_id):
        try:
            return SOSCase.objects.using(self.db).select_for_update().get(pk=case_id)
        except SOSCase.DoesNotExist:
            raise NotFound("Case not found")

    # =========================================================================
    # DISPATCHER LISTINGS (read-only)
    # =========================================================================

    def nearby_officers(self, location, limit=10):
        """
        AVAILABLE and ON_DUTY officers with a known position, nearest first,
        within the assignment radius.
        """
        location = Coordinate(*location)
        officers = list(
            Officer.objects.using(self.db)
            .filter(
                status__in=[OfficerStatus.AVAILABLE, OfficerStatus.ON_DUTY],
                current_lat__isnull=False,
                current_lng__isnull=False,
            )
            .values(*OFFICER_FIELDS)
        )

        results = []
        for ranked in rank_by_distance(location, officers, locate=officer_position):
            if ranked.distance_km > self.config.max_distance_km or len(results) >= limit:
                break
            results.append(dict(ranked.item, distance_km=ranked.distance_km))
        return results

    def nearby_officers_by_station(self, location, limit=5):
        """
        Active stations within the assignment radius, nearest first, each
        with its available officers ranked the way auto-assignment ranks them.
        """
        location = Coordinate(*location)
        stations = (
            Station.objects.using(self.db)
            .filter(is_active=True)
            .values('id', 'name', 'latitude', 'longitude')
        )

        results = []
        for ranked_station in rank_by_distance(location, stations):
            if ranked_station.distance_km > self.config.max_distance_km or len(results) >= limit:
                break
            station = ranked_station.item
            officers = self._rank_station_officers(
                location,
                self._available_officers(station_id=station['id']),
                ranked_station.distance_km,
            )
            results.append(dict(
                station,
                distance_km=ranked_station.distance_km,
                available_count=len(officers),
                available_officers=[
                    dict(r.item, distance_km=r.distance_km) for r in officers
                ],
            ))
        return results

    # =========================================================================
    # REASSIGNMENT
    # =========================================================================

    def reassign(self, case_id, new_officer_id, actor_id):
        """
        Hand a case to another officer.

        Administrative override: no role guards beyond the case being
        non-terminal. The previous officer, if any, becomes AVAILABLE.
        A case still in CREATED moves to ASSIGNED with this call.
        """
        now = timezone.now()

        with transaction.atomic(using=self.db):
            case = self._lock_case(case_id)
            try:
                officer = (
                    Officer.objects.using(self.db)
                    .select_for_update()
                    .get(pk=new_officer_id)
                )
            except Officer.DoesNotExist:
                raise NotFound("Officer not found")

            if CaseStateMachine.is_terminal(case.status):
                raise PreconditionFailed("Cannot reassign a closed case")

            if case.officer_id == officer.pk:
                raise PreconditionFailed("Case is already assigned to this officer")

            busy_elsewhere = (
                SOSCase.objects.using(self.db)
                .filter(officer_id=officer.pk)
                .exclude(status=CaseStatus.CLOSED)
                .exclude(pk=case.pk)
                .exists()
            )
            if busy_elsewhere:
                raise PreconditionFailed(
                    f"Officer {officer.officer_code} already holds an active case"
                )

            previous_officer_id = case.officer_id
            previous_code = None
            if previous_officer_id is not None:
                previous_code = (
                    Officer.objects.using(self.db)
                    .filter(pk=previous_officer_id)
                    .values_list('officer_code', flat=True)
                    .first()
                )

            from_status = case.status
            to_status = from_status
            if from_status == CaseStatus.CREATED:
                CaseStateMachine.validate_transition(from_status, CaseStatus.ASSIGNED)
                to_status = CaseStatus.ASSIGNED

            case.officer = officer
            case.status = to_status
            case.assigned_by = str(actor_id)
            case.assigned_at = now
            case.save(update_fields=['officer', 'status', 'assigned_by', 'assigned_at', 'updated_at'])

            Officer.objects.using(self.db).filter(pk=officer.pk).update(
                status=OfficerStatus.BUSY, updated_at=now
            )
            if previous_officer_id is not None:
                Officer.objects.using(self.db).filter(pk=previous_officer_id).update(
                    status=OfficerStatus.AVAILABLE, updated_at=now
                )

            entry = CaseStatusLog.objects.using(self.db).create(
                case=case,
                from_status=from_status,
                to_status=to_status,
                changed_by=str(actor_id),
                notes=f"Reassigned from {previous_code or 'unassigned'} to {officer.officer_code}",
                timestamp=now,
            )

        logger.info(f"Case {case.case_number} reassigned to officer {officer.officer_code}")
        return Reassigned(
            case_id=case.pk,
            officer_id=officer.pk,
            previous_officer_id=previous_officer_id,
            status_log=entry,
        )
