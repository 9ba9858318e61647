# pcshop/presentation/cart_manager.py
# Acesso ao carrinho da sessão do Django a partir das views e templates.

from typing import Any, Dict

from django.http import HttpRequest

from pcshop.core.dependency_injection import get_gerenciar_carrinho_use_case
from pcshop.core.entities import Carrinho


class CartManager:
    """
    Fachada do carrinho para a camada de apresentação.
    A persistência na sessão fica no repositório; aqui só se monta o contexto.
    """

    def __init__(self, request: HttpRequest):
        self.request = request
        self.use_case = get_gerenciar_carrinho_use_case(request.session)
        self.carrinho: Carrinho = self.use_case.obter()

    def add_item(self, produto_id: str, quantidade: int = 1) -> Carrinho:
        self.carrinho = self.use_case.adicionar(produto_id, quantidade)
        return self.carrinho

    def remove_item(self, produto_id: str) -> Carrinho:
        self.carrinho = self.use_case.remover(produto_id)
        return self.carrinho

    def get_total_items(self) -> int:
        """Quantidade de itens exibidos no carrinho."""
        return len(self.carrinho.itens)

    def get_carrinho_context(self) -> Dict[str, Any]:
        """
        Retorna o contexto do carrinho para uso em templates (Carrinho e total).
        """
        return {
            'carrinho': self.carrinho,
            'total_carrinho': self.carrinho.total_formatado,
            'quantidade_itens': self.get_total_items(),
        }
