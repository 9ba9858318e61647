from dataclasses import dataclass, field
from decimal import Decimal
from datetime import datetime
from typing import Any, Dict, List, Optional
import uuid

from .formatacao import formatar_moeda

# ====================================================================
# ENTIDADES CORE
# Representam os objetos de negócio puros.
# ====================================================================

CATEGORIAS = [
    'processador',
    'placa-mae',
    'placa-de-video',
    'memoria-ram',
    'ssd',
    'fonte',
    'gabinete',
]

ETAPA_DADOS_PESSOAIS = 1
ETAPA_PAGAMENTO = 2

STATUS_PIX_PENDENTE = 'pending'
STATUS_PAGAMENTO_CONCLUIDO = 'completed'


def novo_id() -> str:
    return str(uuid.uuid4())


def rotulo_categoria(categoria: str) -> str:
    """Rótulo exibido no seletor de categorias (ex: 'placa-mae' -> 'PLACA MAE')."""
    return categoria.replace('-', ' ', 1).upper()


@dataclass
class Produto:
    """Entidade do Produto do catálogo."""
    nome: str
    categoria: str = ''
    fabricante: str = ''
    modelo: str = ''
    preco: Decimal = Decimal('0')
    img: str = ''
    img2: str = ''
    slug: str = ''
    garantia: str = ''
    promo: bool = False
    destaque: bool = False
    specs: List[Any] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)
    id: str = field(default_factory=novo_id)

    @property
    def preco_formatado(self) -> str:
        return formatar_moeda(self.preco)

    @property
    def rotulo_categoria(self) -> str:
        return rotulo_categoria(self.categoria) if self.categoria else ''


@dataclass
class ItemCarrinho:
    """Item exibido no carrinho (referência ao produto + campos de exibição)."""
    produto_id: str
    nome: str
    preco: Decimal
    img: str = ''
    slug: str = ''

    @property
    def preco_formatado(self) -> str:
        return formatar_moeda(self.preco)


@dataclass
class TotalItem:
    """Entrada da lista de totais, mantida separadamente dos itens do carrinho."""
    produto_id: str
    quantidade: int
    valor_total: Decimal


@dataclass
class Carrinho:
    """Entidade do Carrinho de Compras."""
    itens: List[ItemCarrinho] = field(default_factory=list)
    totais: List[TotalItem] = field(default_factory=list)

    @property
    def total(self) -> Decimal:
        """Soma a lista de totais (não os itens)."""
        return sum((t.valor_total for t in self.totais), Decimal('0'))

    @property
    def total_formatado(self) -> str:
        return formatar_moeda(self.total)

    def get_item(self, produto_id: str) -> Optional[ItemCarrinho]:
        return next((item for item in self.itens if item.produto_id == produto_id), None)

    def is_empty(self) -> bool:
        return not self.itens


@dataclass
class Cliente:
    """Dados de identificação coletados na primeira etapa do checkout."""
    nome: str = ''
    email: str = ''
    cpf: str = ''

    @property
    def completo(self) -> bool:
        return bool(self.nome and self.email and self.cpf)


@dataclass
class ItemPedido:
    """Snapshot de um item no momento da compra."""
    produto_id: str
    nome: str
    preco: Decimal
    quantidade: int = 1


@dataclass
class Pedido:
    """Entidade do Pedido, sintetizada ao concluir o pagamento."""
    nome_cliente: str
    email_cliente: str
    cpf_cliente: str
    itens: List[ItemPedido]
    total: Decimal
    metodo_pagamento: str
    status_pagamento: str
    dados_cartao: Optional[Dict[str, Any]] = None
    dados_pix: Optional[Dict[str, Any]] = None
    criado_em: datetime = field(default_factory=datetime.now)
    id: str = field(default_factory=novo_id)

    @property
    def total_formatado(self) -> str:
        return formatar_moeda(self.total)


@dataclass
class CalendarioPix:
    expiracao: int
    vencimento: datetime


@dataclass
class DevedorPix:
    nome: str
    documento: str


@dataclass
class CobrancaPix:
    """Cobrança PIX, devolvida pelo provedor ou fabricada localmente."""
    transaction_id: str
    external_id: str
    status: str
    valor: Decimal
    calendario: CalendarioPix
    devedor: DevedorPix
    qrcode: str
    criada_em: datetime
    origem: str = 'SIMULADO'  # 'API' ou 'SIMULADO'


@dataclass
class StatusPix:
    """Situação da cobrança PIX num dado instante."""
    cobranca: CobrancaPix
    status: str
    tempo_restante: int
    resultado: Optional['ResultadoPagamento'] = None

    @property
    def concluido(self) -> bool:
        return self.status == STATUS_PAGAMENTO_CONCLUIDO


@dataclass
class ConfiguracaoPix:
    """Configuração do provedor PIX (chave 'pixConfig')."""
    ativo: bool = False
    client_id: str = ''
    client_secret: str = ''

    @property
    def habilitada(self) -> bool:
        return bool(self.ativo and self.client_id and self.client_secret)


@dataclass
class ResultadoPagamento:
    """Resultado entregue pelo simulador de pagamento ao checkout."""
    metodo: str
    status: str
    transaction_id: str
    dados_pix: Optional[Dict[str, Any]] = None
    dados_cartao: Optional[Dict[str, Any]] = None


@dataclass
class EstadoCheckout:
    """Estado do fluxo de checkout guardado por cliente."""
    etapa: int = ETAPA_DADOS_PESSOAIS
    cliente: Cliente = field(default_factory=Cliente)
    cobranca_pix: Optional[CobrancaPix] = None
