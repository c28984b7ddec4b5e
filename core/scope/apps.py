from django.apps import AppConfig


class ScopeConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'core.scope'
    label = 'scope'
    verbose_name = 'Entity Scope'
