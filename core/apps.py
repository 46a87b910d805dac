from django.apps import AppConfig
import logging
from django.conf import settings


class CoreConfig(AppConfig):
    name = 'core'

    def ready(self):
        """Log important runtime configuration on startup."""
        logger = logging.getLogger(__name__)
        assignment = settings.OFFICER_ASSIGNMENT
        logger.info(
            f"AUTO ASSIGNMENT: enabled={assignment['AUTO_ASSIGN_ENABLED']}, "
            f"max_distance_km={assignment['MAX_DISTANCE_KM']}"
        )
