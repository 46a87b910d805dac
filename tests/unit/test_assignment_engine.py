"""
Unit tests for the assignment engine.

Distances: 0.009 degrees of latitude is roughly 1 km around the base point.
"""
from datetime import timedelta

import pytest
from django.db import DatabaseError

from cases.models import SYSTEM_ACTOR, CaseStatus, CaseStatusLog
from core.exceptions import NotFound, PreconditionFailed
from dispatch.engine import AssignmentConfig, AssignmentEngine
from dispatch.results import Assigned, AssignmentSkipped, Candidate, NoOfficersAvailable
from responders.models import OfficerStatus

pytestmark = [pytest.mark.unit, pytest.mark.django_db]


def engine(**overrides):
    return AssignmentEngine(AssignmentConfig(**overrides))


def run(case, **overrides):
    return engine(**overrides).auto_assign(case.pk, (case.latitude, case.longitude))


def refresh(*objs):
    for obj in objs:
        obj.refresh_from_db()


class TestConfig:

    def test_from_settings(self, settings):
        settings.OFFICER_ASSIGNMENT = {
            'AUTO_ASSIGN_ENABLED': False,
            'MAX_DISTANCE_KM': 4,
            'MAX_COMMIT_ATTEMPTS': 5,
            'LOCATION_STALE_MINUTES': 10,
        }
        config = AssignmentConfig.from_settings()
        assert config.auto_assign_enabled is False
        assert config.max_distance_km == 4.0
        assert config.max_commit_attempts == 5
        assert config.location_stale_after == timedelta(minutes=10)

    def test_engine_defaults_to_settings(self):
        assert AssignmentEngine().config.max_distance_km == 10.0


class TestFallbackMode:
    """No stations configured: officers are ranked directly."""

    def test_picks_nearest_officer(self, case, make_officer):
        near = make_officer(code='OD-2KM', position=(0.018, 0.0))
        far = make_officer(code='OD-5KM', position=(0.045, 0.0))

        result = run(case, max_distance_km=10)

        assert isinstance(result, Assigned)
        assert result.officer_id == near.pk
        assert result.distance_km == pytest.approx(2.0, abs=0.05)
        refresh(case, near, far)
        assert case.status == CaseStatus.ASSIGNED
        assert case.officer_id == near.pk
        assert case.assigned_by == SYSTEM_ACTOR
        assert case.assigned_at is not None
        assert near.status == OfficerStatus.BUSY
        assert far.status == OfficerStatus.AVAILABLE

    def test_nobody_within_radius(self, case, make_officer):
        near = make_officer(position=(0.018, 0.0))
        make_officer(position=(0.045, 0.0))

        result = run(case, max_distance_km=1)

        assert isinstance(result, NoOfficersAvailable)
        assert result.assigned is False
        refresh(case, near)
        assert case.status == CaseStatus.CREATED
        assert case.officer_id is None
        assert near.status == OfficerStatus.AVAILABLE

    def test_appends_system_log_row(self, case, make_officer):
        make_officer(code='OD-2KM', position=(0.018, 0.0))

        result = run(case)

        rows = list(CaseStatusLog.objects.filter(case=case))
        assert [(r.from_status, r.to_status) for r in rows] == [
            (None, CaseStatus.CREATED),
            (CaseStatus.CREATED, CaseStatus.ASSIGNED),
        ]
        assert rows[-1].changed_by == SYSTEM_ACTOR
        assert 'OD-2KM' in rows[-1].notes
        assert '2.00km' in rows[-1].notes
        assert result.status_log == rows[-1]

    def test_ignores_officers_without_position(self, case, make_officer):
        make_officer(position=None)
        assert isinstance(run(case), NoOfficersAvailable)

    @pytest.mark.parametrize('status', [OfficerStatus.BUSY, OfficerStatus.ON_DUTY, OfficerStatus.OFF_DUTY])
    def test_only_available_officers(self, case, make_officer, status):
        make_officer(status=status)
        assert isinstance(run(case), NoOfficersAvailable)

    def test_zero_radius_matches_exact_location_only(self, case, make_officer):
        make_officer(code='OD-AWAY', position=(0.001, 0.0))
        assert isinstance(run(case, max_distance_km=0), NoOfficersAvailable)

        here = make_officer(code='OD-HERE', position=(0.0, 0.0))
        result = run(case, max_distance_km=0)
        assert result.officer_id == here.pk
        assert result.distance_km == 0


class TestStationMode:

    def test_nearest_station_wins_over_nearest_officer(self, case, make_station, make_officer):
        near_station = make_station(name='Near', lat_offset=0.009)
        far_station = make_station(name='Far', lat_offset=0.027)
        from_near = make_officer(code='OD-NEAR', position=(0.03, 0.0), station=near_station)
        make_officer(code='OD-FAR', position=(0.001, 0.0), station=far_station)

        result = run(case)

        assert result.officer_id == from_near.pk
        assert result.station_id == near_station.pk
        assert 'Near' in result.status_log.notes

    def test_picks_closest_officer_within_station(self, case, make_station, make_officer):
        station = make_station(lat_offset=0.009)
        make_officer(code='OD-A', position=(0.03, 0.0), station=station)
        closer = make_officer(code='OD-B', position=(0.005, 0.0), station=station)

        assert run(case).officer_id == closer.pk

    def test_stale_position_uses_station_distance(self, case, make_station, make_officer):
        station = make_station(lat_offset=0.018)
        stale = make_officer(code='OD-STALE', position=(0.0, 0.0), station=station,
                             fix_age=timedelta(hours=2))

        result = run(case)

        assert result.officer_id == stale.pk
        assert result.distance_km == pytest.approx(2.0, abs=0.05)

    def test_unknown_position_uses_station_distance(self, case, make_station, make_officer):
        station = make_station(lat_offset=0.018)
        make_officer(position=None, station=station)

        result = run(case)

        assert result.assigned
        assert result.distance_km == pytest.approx(2.0, abs=0.05)

    def test_skips_station_without_available_officers(self, case, make_station, make_officer):
        empty = make_station(name='Empty', lat_offset=0.009)
        staffed = make_station(name='Staffed', lat_offset=0.027)
        make_officer(status=OfficerStatus.BUSY, station=empty)
        officer = make_officer(station=staffed)

        result = run(case)

        assert result.officer_id == officer.pk
        assert result.station_id == staffed.pk

    def test_stops_at_radius(self, case, make_station, make_officer):
        far = make_station(lat_offset=0.2)
        make_officer(position=(0.0, 0.0), station=far)

        assert isinstance(run(case), NoOfficersAvailable)

    def test_inactive_stations_are_ignored(self, case, make_station, make_officer):
        closed = make_station(name='Closed', lat_offset=0.009, is_active=False)
        make_officer(station=closed, position=(0.005, 0.0))
        loose = make_officer(code='OD-LOOSE')

        # Only an inactive station exists, so the flat search applies
        assert run(case).officer_id == loose.pk

    def test_officers_without_station_ignored_when_stations_exist(self, case, make_station, make_officer):
        make_station(lat_offset=0.009)
        make_officer(station=None)

        assert isinstance(run(case), NoOfficersAvailable)


class TestAssignmentOutcomes:

    def test_disabled_is_skipped(self, case, make_officer):
        officer = make_officer()

        result = run(case, auto_assign_enabled=False)

        assert isinstance(result, AssignmentSkipped)
        refresh(case, officer)
        assert case.status == CaseStatus.CREATED
        assert officer.status == OfficerStatus.AVAILABLE

    def test_unknown_case(self, db):
        import uuid
        with pytest.raises(NotFound):
            engine().auto_assign(uuid.uuid4(), (20.0, 85.0))

    def test_already_assigned_case_is_skipped(self, assigned_case, make_officer):
        other = make_officer()

        result = run(assigned_case)

        assert isinstance(result, AssignmentSkipped)
        other.refresh_from_db()
        assert other.status == OfficerStatus.AVAILABLE

    def test_one_officer_two_cases(self, make_case, make_officer):
        officer = make_officer()
        first, second = make_case(), make_case(lat_offset=0.001)

        results = [run(first), run(second)]

        assert [r.assigned for r in results] == [True, False]
        assert isinstance(results[1], NoOfficersAvailable)
        officer.refresh_from_db()
        assert officer.status == OfficerStatus.BUSY
        assert officer.cases.count() == 1

    def test_failed_commit_leaves_nothing_behind(self, case, make_officer, monkeypatch):
        officer = make_officer()

        def broken(candidate):
            raise DatabaseError("connection lost")
        monkeypatch.setattr(AssignmentEngine, '_assignment_note', staticmethod(broken))

        with pytest.raises(DatabaseError):
            run(case)

        refresh(case, officer)
        assert case.status == CaseStatus.CREATED
        assert case.officer_id is None
        assert officer.status == OfficerStatus.AVAILABLE
        assert case.status_logs.count() == 1


class TestLostRaces:
    """A candidate taken between ranking and commit."""

    def stale_candidates(self, monkeypatch, officers):
        candidates = [Candidate(o.pk, o.officer_code, 1.0) for o in officers]
        monkeypatch.setattr(AssignmentEngine, 'candidates', lambda self, location: iter(candidates))

    def test_taken_officer_is_not_double_booked(self, assigned_case, make_case, monkeypatch):
        # assigned_case holds the only officer; the new case still sees it as a candidate
        case = make_case(lat_offset=0.001)
        officer = assigned_case.officer
        self.stale_candidates(monkeypatch, [officer])

        result = run(case)

        assert isinstance(result, NoOfficersAvailable)
        refresh(case, officer)
        assert case.status == CaseStatus.CREATED
        assert officer.cases.count() == 1

    def test_falls_through_to_next_candidate(self, make_case, make_officer, monkeypatch):
        taken = make_officer(code='OD-TAKEN', status=OfficerStatus.BUSY)
        free = make_officer(code='OD-FREE')
        case = make_case()
        self.stale_candidates(monkeypatch, [taken, free])

        result = run(case)

        assert result.officer_id == free.pk

    def test_gives_up_after_max_attempts(self, make_case, make_officer, monkeypatch):
        taken = [make_officer(status=OfficerStatus.BUSY) for _ in range(2)]
        free = make_officer()
        case = make_case()
        self.stale_candidates(monkeypatch, taken + [free])

        result = run(case, max_commit_attempts=2)

        assert isinstance(result, NoOfficersAvailable)
        free.refresh_from_db()
        assert free.status == OfficerStatus.AVAILABLE


class TestNearbyListings:

    def test_nearby_officers(self, make_officer):
        far = make_officer(code='OD-FAR', position=(0.045, 0.0))
        near = make_officer(code='OD-NEAR', position=(0.018, 0.0), status=OfficerStatus.ON_DUTY)
        make_officer(code='OD-BUSY', position=(0.001, 0.0), status=OfficerStatus.BUSY)
        make_officer(code='OD-OFF', position=(0.001, 0.0), status=OfficerStatus.OFF_DUTY)
        make_officer(code='OD-OUT', position=(0.2, 0.0))
        make_officer(code='OD-NOPOS', position=None)

        results = engine().nearby_officers((20.2961, 85.8245))

        assert [r['id'] for r in results] == [near.pk, far.pk]
        assert results[0]['distance_km'] == pytest.approx(2.0, abs=0.05)

    def test_nearby_officers_limit(self, make_officer):
        for i in range(4):
            make_officer(position=(0.001 * i, 0.0))

        assert len(engine().nearby_officers((20.2961, 85.8245), limit=3)) == 3

    def test_nearby_listing_does_not_mutate(self, make_officer):
        officer = make_officer()
        engine().nearby_officers((20.2961, 85.8245))
        officer.refresh_from_db()
        assert officer.status == OfficerStatus.AVAILABLE

    def test_nearby_stations(self, make_station, make_officer):
        near = make_station(name='Near', lat_offset=0.009)
        far = make_station(name='Far', lat_offset=0.027)
        make_station(name='Out', lat_offset=0.2)
        make_officer(code='OD-1', station=near, position=(0.02, 0.0))
        make_officer(code='OD-2', station=near, position=(0.01, 0.0))
        make_officer(code='OD-3', station=near, status=OfficerStatus.BUSY)

        results = engine().nearby_officers_by_station((20.2961, 85.8245))

        assert [r['id'] for r in results] == [near.pk, far.pk]
        assert results[0]['available_count'] == 2
        assert [o['officer_code'] for o in results[0]['available_officers']] == ['OD-2', 'OD-1']
        assert results[1]['available_officers'] == []

    def test_nearby_stations_limit(self, make_station):
        for i in range(3):
            make_station(name=f"S{i}", lat_offset=0.001 * i)

        assert len(engine().nearby_officers_by_station((20.2961, 85.8245), limit=2)) == 2


class TestReassign:

    def test_moves_case_between_officers(self, assigned_case, make_officer, admin_user):
        previous = assigned_case.officer
        new = make_officer(code='OD-NEW')

        result = engine().reassign(assigned_case.pk, new.pk, admin_user.pk)

        refresh(assigned_case, previous, new)
        assert assigned_case.officer_id == new.pk
        assert assigned_case.status == CaseStatus.ASSIGNED
        assert assigned_case.assigned_by == str(admin_user.pk)
        assert previous.status == OfficerStatus.AVAILABLE
        assert new.status == OfficerStatus.BUSY
        assert result.previous_officer_id == previous.pk

        entry = result.status_log
        assert entry.from_status == entry.to_status == CaseStatus.ASSIGNED
        assert entry.is_reassignment
        assert entry.changed_by == str(admin_user.pk)
        assert previous.officer_code in entry.notes and 'OD-NEW' in entry.notes

    def test_keeps_lifecycle_stage(self, assigned_case, make_officer, admin_user):
        from cases.services import CaseService
        CaseService().update_status(assigned_case.pk, CaseStatus.ACKNOWLEDGED, admin_user)
        new = make_officer()

        result = engine().reassign(assigned_case.pk, new.pk, admin_user.pk)

        assert result.status_log.from_status == result.status_log.to_status == CaseStatus.ACKNOWLEDGED

    def test_unassigned_case_is_manually_assigned(self, case, make_officer, admin_user):
        bystander = make_officer(code='OD-BY', position=(0.05, 0.0))
        target = make_officer(code='OD-TARGET', position=(0.06, 0.0))

        result = engine().reassign(case.pk, target.pk, admin_user.pk)

        refresh(case, bystander, target)
        assert result.previous_officer_id is None
        assert case.status == CaseStatus.ASSIGNED
        assert target.status == OfficerStatus.BUSY
        assert bystander.status == OfficerStatus.AVAILABLE
        assert (result.status_log.from_status, result.status_log.to_status) == (
            CaseStatus.CREATED, CaseStatus.ASSIGNED
        )
        assert 'unassigned' in result.status_log.notes

    def test_unknown_case(self, officer, admin_user):
        import uuid
        with pytest.raises(NotFound):
            engine().reassign(uuid.uuid4(), officer.pk, admin_user.pk)

    def test_unknown_officer(self, case, admin_user):
        import uuid
        with pytest.raises(NotFound):
            engine().reassign(case.pk, uuid.uuid4(), admin_user.pk)

    def test_closed_case(self, assigned_case, make_officer, admin_user):
        from cases.services import CaseService
        CaseService().update_status(assigned_case.pk, CaseStatus.CLOSED, admin_user)

        with pytest.raises(PreconditionFailed):
            engine().reassign(assigned_case.pk, make_officer().pk, admin_user.pk)

    def test_same_officer(self, assigned_case, admin_user):
        with pytest.raises(PreconditionFailed):
            engine().reassign(assigned_case.pk, assigned_case.officer_id, admin_user.pk)

    def test_officer_with_another_active_case(self, assigned_case, make_case, admin_user):
        other = make_case(lat_offset=0.002)

        with pytest.raises(PreconditionFailed):
            engine().reassign(other.pk, assigned_case.officer_id, admin_user.pk)

        other.refresh_from_db()
        assert other.officer_id is None
