from django.apps import AppConfig


class BuddiesConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.buddies'
    label = 'buddies'
    verbose_name = 'Shipping buddies'

    def ready(self):
        from . import receivers  # noqa: F401
