from django.apps import AppConfig


class SettingsCoreConfig(AppConfig):
    name = 'apps.settings_core'
    verbose_name = 'Branch Policies'
