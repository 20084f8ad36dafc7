from django.apps import AppConfig


class TransfusionsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "transfusions"
