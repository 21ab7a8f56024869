"""Django app configuration for wagtail-requirements."""

from django.apps import AppConfig


class WagtailRequirementsConfig(AppConfig):
    name = "wagtail_requirements"
    verbose_name = "Wagtail Requirements"
