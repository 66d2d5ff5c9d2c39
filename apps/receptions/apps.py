from django.apps import AppConfig


class ReceptionsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.receptions'
    verbose_name = 'Receptions'
