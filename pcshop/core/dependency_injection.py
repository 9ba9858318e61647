# pcshop/core/dependency_injection.py
"""
Módulo de Injeção de Dependência (DI).
Responsável por instanciar os Use Cases com suas dependências de Repositórios/Gateways
concretos da camada de Infraestrutura.

Os dados compartilhados (catálogo, pedidos, configuração PIX) ficam no cache
'armazenamento'; carrinho e checkout ficam na sessão recebida da view.
"""
from django.conf import settings

from pcshop.infrastructure.armazenamento import ArmazenamentoCache, ArmazenamentoSessao
from pcshop.infrastructure.gateways import PixupGateway, PixSimuladoGateway, PagamentoCartaoSimuladoGateway
from pcshop.infrastructure.relogio import RelogioSistema
from pcshop.infrastructure.repositories import (
    ProdutoRepositoryArmazenamento,
    PedidoRepositoryArmazenamento,
    ConfiguracaoPixRepositoryArmazenamento,
    CarrinhoRepositoryArmazenamento,
    CheckoutRepositoryArmazenamento,
)
from .use_cases import (
    GerenciarProdutosUseCase,
    GerenciarCarrinhoUseCase,
    SequenciadorCheckoutUseCase,
    ConsultarPedidoUseCase,
    GerarPixUseCase,
    ProcessarCartaoUseCase,
    ConfigurarPixUseCase,
)

# Relógio e armazenamento compartilhado
relogio = RelogioSistema()
armazenamento = ArmazenamentoCache()

produto_repo = ProdutoRepositoryArmazenamento(armazenamento)
pedido_repo = PedidoRepositoryArmazenamento(armazenamento)
configuracao_pix_repo = ConfiguracaoPixRepositoryArmazenamento(armazenamento)
cartao_gateway = PagamentoCartaoSimuladoGateway()


def _carrinho_repo(session) -> CarrinhoRepositoryArmazenamento:
    return CarrinhoRepositoryArmazenamento(ArmazenamentoSessao(session))


def _checkout_repo(session) -> CheckoutRepositoryArmazenamento:
    return CheckoutRepositoryArmazenamento(ArmazenamentoSessao(session))


# ====================================================================
# Use Cases de Catálogo/Administração
# ====================================================================

def get_gerenciar_produtos_use_case() -> GerenciarProdutosUseCase:
    return GerenciarProdutosUseCase(produto_repo)

def get_configurar_pix_use_case() -> ConfigurarPixUseCase:
    return ConfigurarPixUseCase(configuracao_pix_repo)


# ====================================================================
# Use Cases de Carrinho/Checkout (por sessão)
# ====================================================================

def get_gerenciar_carrinho_use_case(session) -> GerenciarCarrinhoUseCase:
    return GerenciarCarrinhoUseCase(_carrinho_repo(session), produto_repo)

def get_sequenciador_checkout_use_case(session) -> SequenciadorCheckoutUseCase:
    return SequenciadorCheckoutUseCase(
        carrinho_repo=_carrinho_repo(session),
        checkout_repo=_checkout_repo(session),
        pedido_repo=pedido_repo,
        relogio=relogio,
    )

def get_consultar_pedido_use_case() -> ConsultarPedidoUseCase:
    return ConsultarPedidoUseCase(pedido_repo)


# ====================================================================
# Use Cases de Pagamento
# ====================================================================

def get_gerar_pix_use_case(session) -> GerarPixUseCase:
    # Gateways criados por chamada para enxergar o relógio atual (substituído nos testes)
    return GerarPixUseCase(
        checkout_repo=_checkout_repo(session),
        configuracao_repo=configuracao_pix_repo,
        gateway_pix=PixupGateway(relogio),
        gateway_simulado=PixSimuladoGateway(relogio),
        relogio=relogio,
        tempo_confirmacao=settings.PIX_TEMPO_CONFIRMACAO,
    )

def get_processar_cartao_use_case(session) -> ProcessarCartaoUseCase:
    return ProcessarCartaoUseCase(_checkout_repo(session), cartao_gateway)
