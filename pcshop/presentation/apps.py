from django.apps import AppConfig


class PresentationConfig(AppConfig):
    name = 'pcshop.presentation'
    label = 'presentation'  # Templates e tags desta camada ficam sob este label
    verbose_name = 'Apresentação (Loja, Painel e API)'
