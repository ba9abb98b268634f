from django.apps import AppConfig


class LinkRankConfig(AppConfig):
    """Configuration for the linkrank Django app."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'linkrank'
