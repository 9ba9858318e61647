# pcshop/core/apps.py

from django.apps import AppConfig


class CoreConfig(AppConfig):
    name = 'pcshop.core'
    label = 'core'
    verbose_name = 'Camada de Entidades e Lógica (Core)'
