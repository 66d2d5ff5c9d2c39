from django.apps import AppConfig


class PvzConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.pvz'
    verbose_name = 'Pickup points'
