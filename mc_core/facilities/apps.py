from django.apps import AppConfig


class FacilitiesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "mc_core.facilities"

    def ready(self) -> None:
        from mc_core.facilities import openapi  # noqa: F401
