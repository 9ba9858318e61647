"""
Camada de Infraestrutura: Implementação dos Repositórios.

Esta camada traduz as operações abstratas definidas nas Portas da Core
em leituras e gravações no armazenamento chave-valor. Cada mutação regrava
o valor inteiro da chave (último a gravar vence).
"""
import logging
from typing import List, Optional

from pcshop.core.entities import Produto, Pedido, Carrinho, EstadoCheckout, ConfiguracaoPix
from pcshop.core.ports import (
    IArmazenamento,
    IProdutoRepository,
    IPedidoRepository,
    IConfiguracaoPixRepository,
    ICarrinhoRepository,
    ICheckoutRepository,
)

from .dados_iniciais import PRODUTO_EXEMPLO, com_id
from .mappers import (
    ProdutoMapper, PedidoMapper, ConfiguracaoPixMapper, CarrinhoMapper, EstadoCheckoutMapper,
)

logger = logging.getLogger(__name__)

CHAVE_PRODUTOS = 'products'
CHAVE_PEDIDOS = 'orders'
CHAVE_CONFIG_PIX = 'pixConfig'

CHAVE_CARRINHO = 'carrinho'
CHAVE_CARRINHO_TOTAIS = 'carrinho_totais'
CHAVE_CHECKOUT = 'checkout'


# ====================================================================
# 1. REPOSITÓRIOS COMPARTILHADOS (catálogo, pedidos, configuração)
# ====================================================================

class ProdutoRepositoryArmazenamento(IProdutoRepository):
    """Catálogo gravado como lista completa na chave 'products'."""

    def __init__(self, armazenamento: IArmazenamento):
        self.armazenamento = armazenamento

    def _ler_registros(self) -> list:
        registros = self.armazenamento.ler(CHAVE_PRODUTOS)
        if registros is None:
            # Primeira leitura: grava o produto de exemplo
            registros = [com_id(PRODUTO_EXEMPLO)]
            self.armazenamento.gravar(CHAVE_PRODUTOS, registros)
            logger.info("Catálogo vazio; produto de exemplo gravado.")
        return registros

    def listar(self) -> List[Produto]:
        return [ProdutoMapper.to_entity(r) for r in self._ler_registros()]

    def buscar_por_id(self, produto_id: str) -> Optional[Produto]:
        return next((p for p in self.listar() if p.id == produto_id), None)

    def salvar_lista(self, produtos: List[Produto]) -> None:
        self.armazenamento.gravar(CHAVE_PRODUTOS, [ProdutoMapper.to_model(p) for p in produtos])


class PedidoRepositoryArmazenamento(IPedidoRepository):
    """Pedidos acumulados na chave 'orders' (somente inclusão)."""

    def __init__(self, armazenamento: IArmazenamento):
        self.armazenamento = armazenamento

    def adicionar(self, pedido: Pedido) -> Pedido:
        registros = self.armazenamento.ler(CHAVE_PEDIDOS, [])
        registros.append(PedidoMapper.to_model(pedido))
        self.armazenamento.gravar(CHAVE_PEDIDOS, registros)
        return pedido

    def listar(self) -> List[Pedido]:
        return [PedidoMapper.to_entity(r) for r in self.armazenamento.ler(CHAVE_PEDIDOS, [])]

    def buscar_por_id(self, pedido_id: str) -> Optional[Pedido]:
        return next((p for p in self.listar() if p.id == pedido_id), None)


class ConfiguracaoPixRepositoryArmazenamento(IConfiguracaoPixRepository):

    def __init__(self, armazenamento: IArmazenamento):
        self.armazenamento = armazenamento

    def obter(self) -> Optional[ConfiguracaoPix]:
        dados = self.armazenamento.ler(CHAVE_CONFIG_PIX)
        if not dados:
            return None
        return ConfiguracaoPixMapper.to_entity(dados)

    def salvar(self, configuracao: ConfiguracaoPix) -> ConfiguracaoPix:
        self.armazenamento.gravar(CHAVE_CONFIG_PIX, ConfiguracaoPixMapper.to_model(configuracao))
        return configuracao


# ====================================================================
# 2. REPOSITÓRIOS DO CLIENTE (sessão)
# ====================================================================

class CarrinhoRepositoryArmazenamento(ICarrinhoRepository):
    """Itens e lista de totais gravados em chaves separadas."""

    def __init__(self, armazenamento: IArmazenamento):
        self.armazenamento = armazenamento

    def obter(self) -> Carrinho:
        return CarrinhoMapper.to_entity(
            self.armazenamento.ler(CHAVE_CARRINHO, []),
            self.armazenamento.ler(CHAVE_CARRINHO_TOTAIS, []),
        )

    def salvar(self, carrinho: Carrinho) -> Carrinho:
        itens, totais = CarrinhoMapper.to_model(carrinho)
        self.armazenamento.gravar(CHAVE_CARRINHO, itens)
        self.armazenamento.gravar(CHAVE_CARRINHO_TOTAIS, totais)
        return carrinho

    def limpar(self) -> None:
        self.armazenamento.remover(CHAVE_CARRINHO)
        self.armazenamento.remover(CHAVE_CARRINHO_TOTAIS)


class CheckoutRepositoryArmazenamento(ICheckoutRepository):

    def __init__(self, armazenamento: IArmazenamento):
        self.armazenamento = armazenamento

    def obter(self) -> EstadoCheckout:
        return EstadoCheckoutMapper.to_entity(self.armazenamento.ler(CHAVE_CHECKOUT))

    def salvar(self, estado: EstadoCheckout) -> EstadoCheckout:
        self.armazenamento.gravar(CHAVE_CHECKOUT, EstadoCheckoutMapper.to_model(estado))
        return estado

    def limpar(self) -> None:
        self.armazenamento.remover(CHAVE_CHECKOUT)
