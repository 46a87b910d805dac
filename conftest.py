"""
Saathi Test Configuration

Pytest fixtures shared by the unit and integration suites.

Coordinates are around Bhubaneswar. 0.009 degrees of latitude is roughly
one kilometre.
"""
from datetime import timedelta

import pytest
from django.utils import timezone
from rest_framework.test import APIClient

BASE_LAT = 20.2961
BASE_LNG = 85.8245


# ============================================================================
# Users
# ============================================================================

@pytest.fixture
def api_client():
    """DRF API client."""
    return APIClient()


@pytest.fixture
def citizen(db):
    from authentication.models import User
    return User.objects.create_user(
        identifier='+919000000001',
        password='citizenpass123',
        name='Test Citizen',
    )


@pytest.fixture
def admin_user(db):
    from authentication.models import User
    return User.objects.create_admin(
        identifier='dispatch@saathi.test',
        password='adminpass1234',
        name='Dispatcher',
    )


@pytest.fixture
def citizen_client(citizen):
    client = APIClient()
    client.force_authenticate(user=citizen)
    return client


@pytest.fixture
def admin_client(admin_user):
    client = APIClient()
    client.force_authenticate(user=admin_user)
    return client


# ============================================================================
# Stations and officers
# ============================================================================

@pytest.fixture
def make_station(db):
    """Factory for stations; offsets are in degrees from the base point."""
    from responders.models import Station

    def _make(name='Capital Police Station', lat_offset=0.0, lng_offset=0.0, **extra):
        return Station.objects.create(
            name=name,
            latitude=BASE_LAT + lat_offset,
            longitude=BASE_LNG + lng_offset,
            **extra,
        )
    return _make


@pytest.fixture
def make_officer(db):
    """
    Factory for officers with a user account.

    position=None leaves the officer without coordinates; fix_age controls
    how old the last position fix is.
    """
    from authentication.models import User
    from responders.models import Officer, OfficerStatus

    counter = {'n': 0}

    def _make(code=None, status=OfficerStatus.AVAILABLE, position=(0.0, 0.0),
              station=None, fix_age=timedelta(minutes=1)):
        counter['n'] += 1
        code = code or f"OD-{counter['n']:04d}"
        user = User.objects.create_officer(
            identifier=f"{code.lower()}@police.test",
            password='officerpass123',
            name=f"Officer {code}",
        )
        fields = {}
        if position is not None:
            fields = {
                'current_lat': BASE_LAT + position[0],
                'current_lng': BASE_LNG + position[1],
                'last_location_update': timezone.now() - fix_age,
            }
        return Officer.objects.create(
            user=user,
            officer_code=code,
            status=status,
            station=station,
            **fields,
        )
    return _make


@pytest.fixture
def officer(make_officer):
    return make_officer(code='OD-1001')


@pytest.fixture
def officer_client(officer):
    client = APIClient()
    client.force_authenticate(user=officer.user)
    return client


# ============================================================================
# Cases
# ============================================================================

@pytest.fixture
def make_case(db, citizen):
    """Factory for cases created through the intake service."""
    from cases.services import CaseService

    def _make(lat_offset=0.0, lng_offset=0.0, description='Help needed'):
        return CaseService().create_case(
            reported_by=citizen,
            latitude=BASE_LAT + lat_offset,
            longitude=BASE_LNG + lng_offset,
            description=description,
            address='Janpath, Bhubaneswar',
        )
    return _make


@pytest.fixture
def case(make_case):
    return make_case()


@pytest.fixture
def assigned_case(case, officer):
    """A case auto-assigned to `officer`."""
    from dispatch.engine import AssignmentEngine

    result = AssignmentEngine().auto_assign(case.pk, (case.latitude, case.longitude))
    assert result.assigned
    case.refresh_from_db()
    return case


@pytest.fixture(autouse=True)
def no_geocoding(monkeypatch):
    """Never call Nominatim from tests; individual tests may patch over this."""
    import requests

    def offline(*args, **kwargs):
        raise requests.ConnectionError("network disabled in tests")

    monkeypatch.setattr(requests, 'get', offline)
