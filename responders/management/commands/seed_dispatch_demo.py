"""
Management command to seed demo dispatch data.

Usage:
    python manage.py seed_dispatch_demo

Creates, around Bhubaneswar:
    - dispatch@saathi.demo / Dispatch@123 (admin)
    - citizen@saathi.demo / Citizen@123 (citizen)
    - two stations, each with two AVAILABLE officers
      (<code lowercased>@police.demo / Officer@123)
"""

from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from authentication.models import User, UserRole
from responders.models import Officer, OfficerStatus, Station

DEMO_USERS = [
    {'identifier': 'dispatch@saathi.demo', 'password': 'Dispatch@123', 'role': UserRole.ADMIN,
     'name': 'Demo Dispatcher', 'is_staff': True},
    {'identifier': 'citizen@saathi.demo', 'password': 'Citizen@123', 'role': UserRole.CITIZEN,
     'name': 'Demo Citizen'},
]

DEMO_STATIONS = [
    {
        'name': 'Capital Police Station',
        'latitude': 20.2700,
        'longitude': 85.8400,
        'district': 'Khordha',
        'officers': [('OD-0101', 20.2720, 85.8410), ('OD-0102', 20.2650, 85.8380)],
    },
    {
        'name': 'Saheed Nagar Police Station',
        'latitude': 20.2900,
        'longitude': 85.8450,
        'district': 'Khordha',
        'officers': [('OD-0201', 20.2950, 85.8470), ('OD-0202', 20.2880, 85.8500)],
    },
]


class Command(BaseCommand):
    help = 'Seed demo users, stations and officers for local dispatch testing'

    @transaction.atomic
    def handle(self, *args, **options):
        created_users = 0
        for data in DEMO_USERS:
            data = dict(data)
            identifier = data.pop('identifier')
            password = data.pop('password')
            if User.objects.filter(identifier=identifier).exists():
                self.stdout.write(f"  User exists: {identifier}")
                continue
            User.objects.create_user(identifier, password, **data)
            created_users += 1
            self.stdout.write(self.style.SUCCESS(f"  Created user: {identifier}"))

        created_officers = 0
        now = timezone.now()
        for data in DEMO_STATIONS:
            data = dict(data)
            officers = data.pop('officers')
            station, _ = Station.objects.get_or_create(name=data.pop('name'), defaults=data)

            for code, lat, lng in officers:
                if Officer.objects.filter(officer_code=code).exists():
                    self.stdout.write(f"  Officer exists: {code}")
                    continue
                user = User.objects.create_officer(
                    f"{code.lower()}@police.demo", 'Officer@123', name=f"Officer {code}"
                )
                Officer.objects.create(
                    user=user,
                    officer_code=code,
                    station=station,
                    status=OfficerStatus.AVAILABLE,
                    current_lat=lat,
                    current_lng=lng,
                    last_location_update=now,
                )
                created_officers += 1
                self.stdout.write(self.style.SUCCESS(f"  Created officer: {code} at {station.name}"))

        self.stdout.write("")
        self.stdout.write(self.style.SUCCESS("=== Seed Summary ==="))
        self.stdout.write(f"  Users created: {created_users}")
        self.stdout.write(f"  Officers created: {created_officers}")
