from django.apps import AppConfig


class RespondersConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'responders'
    verbose_name = 'Stations & Officers'
