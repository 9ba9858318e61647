from django.apps import AppConfig


class InfrastructureConfig(AppConfig):
    name = 'pcshop.infrastructure'
    label = 'infrastructure'  # Label curto, usado pelo comando load_initial_data
    verbose_name = 'Infraestrutura (Armazenamento e Gateways)'
