from django.apps import AppConfig


class OffboardingConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'HR.offboarding'
    label = 'offboarding'
    verbose_name = 'Employee Offboarding'
