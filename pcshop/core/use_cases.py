# pcshop/core/use_cases.py
"""
Implementação dos Casos de Uso (Lógica de Negócio) da loja.
Esta camada depende apenas das Entidades e Portas (Interfaces) do Core,
garantindo o isolamento da lógica de negócio.
"""
import logging
import uuid
from dataclasses import replace
from decimal import Decimal, InvalidOperation
from typing import List, Optional

# Entidades e Exceções
from pcshop.core.entities import (
    Produto, Carrinho, ItemCarrinho, TotalItem, Cliente, EstadoCheckout,
    Pedido, ItemPedido, CobrancaPix, DevedorPix, StatusPix, ConfiguracaoPix,
    ResultadoPagamento, novo_id,
    ETAPA_DADOS_PESSOAIS, ETAPA_PAGAMENTO, STATUS_PAGAMENTO_CONCLUIDO,
)
from pcshop.core.exceptions import (
    DadosInvalidosError,
    DadosObrigatoriosError,
    ItemNaoEncontradoError,
    ProdutoNaoEncontradoError,
    PedidoNaoEncontradoError,
    ConfirmacaoNecessariaError,
    CarrinhoVazioError,
    EtapaInvalidaError,
    PagamentoFalhouError,
)
from pcshop.core.formatacao import gerar_slug, formatar_cpf, somente_digitos

# Portas (Interfaces)
from pcshop.core.ports import (
    IProdutoRepository,
    IPedidoRepository,
    IConfiguracaoPixRepository,
    ICarrinhoRepository,
    ICheckoutRepository,
    IGatewayPix,
    IGatewayCartao,
    IRelogio,
)

logger = logging.getLogger(__name__)


# ====================================================================
# 1. CASOS DE USO DO CATÁLOGO (ADMIN)
# ====================================================================

class GerenciarProdutosUseCase:
    """
    Listagem, criação, edição e exclusão de produtos.
    Toda mutação regrava a lista completa de produtos.
    """
    def __init__(self, produto_repo: IProdutoRepository):
        self.produto_repo = produto_repo

    def listar(self) -> List[Produto]:
        return self.produto_repo.listar()

    def buscar(self, produto_id: str) -> Produto:
        produto = self.produto_repo.buscar_por_id(produto_id)
        if not produto:
            raise ProdutoNaoEncontradoError(f"Produto ID {produto_id} não encontrado.")
        return produto

    def criar(self, dados: dict) -> Produto:
        """Cria o produto com ID aleatório e slug derivado do nome."""
        produto = self._montar_produto(dados, produto_id=novo_id())
        produto.slug = gerar_slug(produto.nome)

        produtos = self.produto_repo.listar()
        produtos.append(produto)
        self.produto_repo.salvar_lista(produtos)

        logger.info("Produto '%s' criado (ID %s).", produto.nome, produto.id)
        return produto

    def atualizar(self, produto_id: str, dados: dict) -> Produto:
        """Substitui o registro inteiro, preservando o ID."""
        produtos = self.produto_repo.listar()
        if not any(p.id == produto_id for p in produtos):
            raise ProdutoNaoEncontradoError(f"Produto ID {produto_id} não existe para atualização.")

        atualizado = self._montar_produto(dados, produto_id=produto_id)
        if not atualizado.slug:
            atualizado.slug = gerar_slug(atualizado.nome)

        produtos = [atualizado if p.id == produto_id else p for p in produtos]
        self.produto_repo.salvar_lista(produtos)

        logger.info("Produto ID %s atualizado.", produto_id)
        return atualizado

    def deletar(self, produto_id: str, confirmado: bool = False) -> None:
        if not confirmado:
            raise ConfirmacaoNecessariaError()

        produtos = self.produto_repo.listar()
        restantes = [p for p in produtos if p.id != produto_id]
        if len(restantes) == len(produtos):
            raise ProdutoNaoEncontradoError(f"Produto ID {produto_id} não pode ser excluído, pois não existe.")

        self.produto_repo.salvar_lista(restantes)
        logger.info("Produto ID %s excluído.", produto_id)

    @staticmethod
    def _montar_produto(dados: dict, produto_id: str) -> Produto:
        try:
            preco = Decimal(str(dados.get('preco') or 0))
        except InvalidOperation:
            raise DadosInvalidosError(f"Preço inválido: {dados.get('preco')!r}.")

        return Produto(
            id=produto_id,
            nome=dados.get('nome') or '',
            categoria=dados.get('categoria') or '',
            fabricante=dados.get('fabricante') or '',
            modelo=dados.get('modelo') or '',
            preco=preco,
            img=dados.get('img') or '',
            img2=dados.get('img2') or '',
            slug=dados.get('slug') or '',
            garantia=dados.get('garantia') or '',
            promo=bool(dados.get('promo')),
            destaque=bool(dados.get('destaque')),
            specs=list(dados.get('specs') or []),
            tags=list(dados.get('tags') or []),
        )


# ====================================================================
# 2. CASOS DE USO DO CARRINHO
# ====================================================================

class GerenciarCarrinhoUseCase:
    """
    Centraliza a gestão do carrinho. O total vem da lista de totais,
    que é mantida em paralelo aos itens exibidos.
    """
    def __init__(self, carrinho_repo: ICarrinhoRepository, produto_repo: IProdutoRepository):
        self.carrinho_repo = carrinho_repo
        self.produto_repo = produto_repo

    def obter(self) -> Carrinho:
        return self.carrinho_repo.obter()

    def adicionar(self, produto_id: str, quantidade: int = 1) -> Carrinho:
        if quantidade < 1:
            raise DadosInvalidosError("A quantidade a adicionar deve ser positiva.")

        produto = self.produto_repo.buscar_por_id(produto_id)
        if not produto:
            raise ProdutoNaoEncontradoError(f"Produto ID {produto_id} não encontrado.")

        carrinho = self.carrinho_repo.obter()
        carrinho.itens.append(ItemCarrinho(
            produto_id=produto.id,
            nome=produto.nome,
            preco=produto.preco,
            img=produto.img,
            slug=produto.slug,
        ))
        carrinho.totais.append(TotalItem(
            produto_id=produto.id,
            quantidade=quantidade,
            valor_total=produto.preco * quantidade,
        ))
        return self.carrinho_repo.salvar(carrinho)

    def remover(self, produto_id: str) -> Carrinho:
        """Remove o item e a sua entrada na lista de totais."""
        carrinho = self.carrinho_repo.obter()

        item = carrinho.get_item(produto_id)
        if not item:
            raise ItemNaoEncontradoError("Item não encontrado no carrinho.")
        carrinho.itens.remove(item)

        total = next((t for t in carrinho.totais if t.produto_id == produto_id), None)
        if total:
            carrinho.totais.remove(total)

        return self.carrinho_repo.salvar(carrinho)

    def limpar(self) -> None:
        self.carrinho_repo.limpar()


# ====================================================================
# 3. CASOS DE USO DE CHECKOUT E PEDIDO
# ====================================================================

class SequenciadorCheckoutUseCase:
    """
    Fluxo linear de duas etapas: dados pessoais -> pagamento.
    A ação terminal cria o pedido, limpa o carrinho e reinicia o fluxo.
    """
    def __init__(self,
                 carrinho_repo: ICarrinhoRepository,
                 checkout_repo: ICheckoutRepository,
                 pedido_repo: IPedidoRepository,
                 relogio: IRelogio):
        self.carrinho_repo = carrinho_repo
        self.checkout_repo = checkout_repo
        self.pedido_repo = pedido_repo
        self.relogio = relogio

    def obter_estado(self) -> EstadoCheckout:
        return self.checkout_repo.obter()

    def obter_carrinho(self) -> Carrinho:
        """Carrinho do checkout; vazio interrompe o fluxo."""
        carrinho = self.carrinho_repo.obter()
        if carrinho.is_empty():
            raise CarrinhoVazioError()
        return carrinho

    def enviar_dados_cliente(self, nome: str, email: str, cpf: str) -> EstadoCheckout:
        self.obter_carrinho()

        estado = self.checkout_repo.obter()
        estado.cliente = Cliente(nome=nome or '', email=email or '', cpf=formatar_cpf(cpf or ''))

        if not estado.cliente.completo:
            estado.etapa = ETAPA_DADOS_PESSOAIS
            self.checkout_repo.salvar(estado)
            raise DadosObrigatoriosError()

        estado.etapa = ETAPA_PAGAMENTO
        return self.checkout_repo.salvar(estado)

    def concluir_pagamento(self, resultado: ResultadoPagamento) -> Pedido:
        """Cria exatamente um pedido a partir do carrinho e do resultado do pagamento."""
        estado = self.checkout_repo.obter()
        if estado.etapa != ETAPA_PAGAMENTO:
            raise EtapaInvalidaError("Informe os dados pessoais antes de concluir o pagamento.")

        carrinho = self.obter_carrinho()

        pedido = Pedido(
            nome_cliente=estado.cliente.nome,
            email_cliente=estado.cliente.email,
            cpf_cliente=estado.cliente.cpf,
            itens=[
                ItemPedido(produto_id=item.produto_id, nome=item.nome, preco=item.preco, quantidade=1)
                for item in carrinho.itens
            ],
            total=carrinho.total,
            metodo_pagamento=resultado.metodo,
            status_pagamento=resultado.status,
            dados_cartao=resultado.dados_cartao,
            dados_pix=resultado.dados_pix,
            criado_em=self.relogio.agora(),
        )
        self.pedido_repo.adicionar(pedido)

        self.carrinho_repo.limpar()
        self.checkout_repo.limpar()

        logger.info("Pedido %s criado (%s, total %s).", pedido.id, pedido.metodo_pagamento, pedido.total)
        return pedido


class ConsultarPedidoUseCase:
    """Busca pedidos gravados (página de confirmação)."""
    def __init__(self, pedido_repo: IPedidoRepository):
        self.pedido_repo = pedido_repo

    def executar(self, pedido_id: str) -> Pedido:
        pedido = self.pedido_repo.buscar_por_id(pedido_id)
        if not pedido:
            raise PedidoNaoEncontradoError(f"Pedido ID {pedido_id} não encontrado.")
        return pedido


# ====================================================================
# 4. CASOS DE USO DE PAGAMENTO
# ====================================================================

class GerarPixUseCase:
    """
    Simulador de pagamento PIX.

    Tenta o provedor externo apenas com configuração ativa e credenciais;
    qualquer falha cai na cobrança fabricada localmente. A conclusão é
    declarada após `tempo_confirmacao` segundos, qualquer que seja o caminho.
    """
    def __init__(self,
                 checkout_repo: ICheckoutRepository,
                 configuracao_repo: IConfiguracaoPixRepository,
                 gateway_pix: IGatewayPix,
                 gateway_simulado: IGatewayPix,
                 relogio: IRelogio,
                 tempo_confirmacao: int = 30):
        self.checkout_repo = checkout_repo
        self.configuracao_repo = configuracao_repo
        self.gateway_pix = gateway_pix
        self.gateway_simulado = gateway_simulado
        self.relogio = relogio
        self.tempo_confirmacao = tempo_confirmacao

    def gerar(self, valor: Decimal, nome: str, cpf: str) -> CobrancaPix:
        documento = somente_digitos(cpf)
        if not (nome or '').strip() or len(documento) != 11:
            raise DadosInvalidosError("Preencha nome e CPF válidos")

        estado = self.checkout_repo.obter()
        if estado.etapa != ETAPA_PAGAMENTO:
            raise EtapaInvalidaError("Informe os dados pessoais antes de gerar o PIX.")

        devedor = DevedorPix(nome=nome, documento=documento)
        external_id = str(uuid.uuid4())
        configuracao = self.configuracao_repo.obter()

        cobranca = None
        if configuracao is None:
            logger.warning("Configuração PIX não encontrada; usando PIX simulado.")
        elif not configuracao.habilitada:
            logger.info("Provedor PIX inativo ou sem credenciais; usando PIX simulado.")
        else:
            try:
                cobranca = self.gateway_pix.gerar_cobranca(valor, devedor, external_id, configuracao)
            except PagamentoFalhouError as e:
                logger.warning("Provedor PIX indisponível (%s); usando PIX simulado.", e.message)

        if cobranca is None:
            cobranca = self.gateway_simulado.gerar_cobranca(valor, devedor, external_id, configuracao)

        estado.cobranca_pix = cobranca
        self.checkout_repo.salvar(estado)

        logger.info("Cobrança PIX %s gerada (%s).", cobranca.transaction_id, cobranca.origem)
        return cobranca

    def consultar(self) -> StatusPix:
        """Cronômetro e status da cobrança em andamento."""
        estado = self.checkout_repo.obter()
        cobranca = estado.cobranca_pix
        if cobranca is None:
            raise ItemNaoEncontradoError("Nenhuma cobrança PIX em andamento.")

        decorrido = (self.relogio.agora() - cobranca.criada_em).total_seconds()
        tempo_restante = max(0, cobranca.calendario.expiracao - int(decorrido))

        if decorrido < self.tempo_confirmacao:
            return StatusPix(cobranca=cobranca, status=cobranca.status, tempo_restante=tempo_restante)

        resultado = ResultadoPagamento(
            metodo='pix',
            status=STATUS_PAGAMENTO_CONCLUIDO,
            transaction_id=cobranca.transaction_id,
            dados_pix={
                'transactionId': cobranca.transaction_id,
                'qrcode': cobranca.qrcode,
                'status': STATUS_PAGAMENTO_CONCLUIDO,
            },
        )
        return StatusPix(
            cobranca=replace(cobranca, status=STATUS_PAGAMENTO_CONCLUIDO),
            status=STATUS_PAGAMENTO_CONCLUIDO,
            tempo_restante=tempo_restante,
            resultado=resultado,
        )


class ProcessarCartaoUseCase:
    """Pagamento com cartão simulado, disponível na etapa de pagamento."""
    def __init__(self, checkout_repo: ICheckoutRepository, gateway_cartao: IGatewayCartao):
        self.checkout_repo = checkout_repo
        self.gateway_cartao = gateway_cartao

    def executar(self, valor: Decimal, numero: str, titular: str, validade: str, cvv: str) -> ResultadoPagamento:
        if self.checkout_repo.obter().etapa != ETAPA_PAGAMENTO:
            raise EtapaInvalidaError("Informe os dados pessoais antes do pagamento.")
        return self.gateway_cartao.processar_pagamento(valor, numero, titular, validade, cvv)


class ConfigurarPixUseCase:
    """Leitura e gravação da configuração do provedor PIX."""
    def __init__(self, configuracao_repo: IConfiguracaoPixRepository):
        self.configuracao_repo = configuracao_repo

    def obter(self) -> Optional[ConfiguracaoPix]:
        return self.configuracao_repo.obter()

    def salvar(self, ativo: bool, client_id: str, client_secret: str = '') -> ConfiguracaoPix:
        """Segredo em branco mantém o segredo já gravado."""
        atual = self.configuracao_repo.obter()
        if not client_secret and atual:
            client_secret = atual.client_secret

        configuracao = ConfiguracaoPix(
            ativo=bool(ativo),
            client_id=(client_id or '').strip(),
            client_secret=client_secret or '',
        )
        logger.info("Configuração PIX salva (ativo=%s).", configuracao.ativo)
        return self.configuracao_repo.salvar(configuracao)
