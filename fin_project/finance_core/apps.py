from django.apps import AppConfig


class FinanceCoreConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "finance_core"
    verbose_name = "Finance"
