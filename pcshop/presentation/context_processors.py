"""
Context processors para a aplicação presentation.
"""
from .cart_manager import CartManager


def carrinho_context(request):
    """
    Adiciona informações do carrinho ao contexto global dos templates.
    """
    if not hasattr(request, 'session'):
        return {}
    return CartManager(request).get_carrinho_context()
