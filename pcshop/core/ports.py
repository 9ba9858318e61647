# pcshop/core/ports.py
"""
Definição das Portas (Interfaces/Protocolos) da Arquitetura Limpa.

Estes protocolos definem o contrato que a camada de Infraestrutura (armazenamento
chave-valor, repositórios, gateways) DEVE seguir para se conectar aos Casos de Uso.
"""

from typing import Protocol, List, Optional, Any
from abc import abstractmethod
from datetime import datetime
from decimal import Decimal

from pcshop.core.entities import (
    Produto, Pedido, Carrinho, EstadoCheckout, ConfiguracaoPix,
    CobrancaPix, DevedorPix, ResultadoPagamento
)


# ====================================================================
# 1. ARMAZENAMENTO CHAVE-VALOR
# ====================================================================

class IArmazenamento(Protocol):
    """Armazenamento chave-valor síncrono, último a gravar vence."""

    @abstractmethod
    def ler(self, chave: str, padrao: Any = None) -> Any: ...

    @abstractmethod
    def gravar(self, chave: str, valor: Any) -> None: ...

    @abstractmethod
    def remover(self, chave: str) -> None: ...


# ====================================================================
# 2. REPOSITÓRIOS (Portas de Persistência)
# ====================================================================

class IProdutoRepository(Protocol):
    """Lista de produtos persistida como snapshot completo."""

    @abstractmethod
    def listar(self) -> List[Produto]: ...

    @abstractmethod
    def buscar_por_id(self, produto_id: str) -> Optional[Produto]: ...

    @abstractmethod
    def salvar_lista(self, produtos: List[Produto]) -> None: ...


class IPedidoRepository(Protocol):

    @abstractmethod
    def adicionar(self, pedido: Pedido) -> Pedido: ...

    @abstractmethod
    def listar(self) -> List[Pedido]: ...

    @abstractmethod
    def buscar_por_id(self, pedido_id: str) -> Optional[Pedido]: ...


class IConfiguracaoPixRepository(Protocol):

    @abstractmethod
    def obter(self) -> Optional[ConfiguracaoPix]: ...

    @abstractmethod
    def salvar(self, configuracao: ConfiguracaoPix) -> ConfiguracaoPix: ...


class ICarrinhoRepository(Protocol):
    """Carrinho do cliente atual (itens e lista de totais)."""

    @abstractmethod
    def obter(self) -> Carrinho: ...

    @abstractmethod
    def salvar(self, carrinho: Carrinho) -> Carrinho: ...

    @abstractmethod
    def limpar(self) -> None: ...


class ICheckoutRepository(Protocol):

    @abstractmethod
    def obter(self) -> EstadoCheckout: ...

    @abstractmethod
    def salvar(self, estado: EstadoCheckout) -> EstadoCheckout: ...

    @abstractmethod
    def limpar(self) -> None: ...


# ====================================================================
# 3. GATEWAYS (Portas de Serviços Externos)
# ====================================================================

class IGatewayPix(Protocol):
    """Gera uma cobrança PIX (provedor externo ou simulação local)."""

    @abstractmethod
    def gerar_cobranca(
        self,
        valor: Decimal,
        devedor: DevedorPix,
        external_id: str,
        configuracao: Optional[ConfiguracaoPix] = None
    ) -> CobrancaPix: ...


class IGatewayCartao(Protocol):

    @abstractmethod
    def processar_pagamento(
        self,
        valor: Decimal,
        numero: str,
        titular: str,
        validade: str,
        cvv: str
    ) -> ResultadoPagamento: ...


class IRelogio(Protocol):

    @abstractmethod
    def agora(self) -> datetime: ...
