from django.apps import AppConfig


class CentralHistoryConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "mc_core.central_history"
    label = "central_history"
