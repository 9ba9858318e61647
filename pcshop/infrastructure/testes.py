import base64
import json
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from io import StringIO
from unittest.mock import Mock, patch

import requests
from django.core.management import call_command
from django.test import SimpleTestCase, override_settings

from pcshop.core.entities import (
    Produto, Carrinho, ItemCarrinho, TotalItem, EstadoCheckout, Cliente, Pedido, ItemPedido,
    DevedorPix, ConfiguracaoPix, ETAPA_PAGAMENTO,
)
from pcshop.core.exceptions import PagamentoFalhouError
from pcshop.infrastructure.armazenamento import ArmazenamentoCache, ArmazenamentoSessao
from pcshop.infrastructure.gateways import PixupGateway, PixSimuladoGateway, PagamentoCartaoSimuladoGateway
from pcshop.infrastructure.repositories import (
    ProdutoRepositoryArmazenamento,
    PedidoRepositoryArmazenamento,
    ConfiguracaoPixRepositoryArmazenamento,
    CarrinhoRepositoryArmazenamento,
    CheckoutRepositoryArmazenamento,
)

T0 = datetime(2024, 5, 10, 12, 0, 0, tzinfo=timezone.utc)

CACHES_TESTE = {
    'default': {'BACKEND': 'django.core.cache.backends.locmem.LocMemCache', 'LOCATION': 'pcshop-testes-default'},
    'armazenamento': {'BACKEND': 'django.core.cache.backends.locmem.LocMemCache', 'LOCATION': 'pcshop-testes-armazenamento'},
}


class ArmazenamentoMemoria:
    """Armazenamento em dicionário com valores JSON, como o cache real."""

    def __init__(self, dados=None):
        self.dados = dict(dados or {})

    def ler(self, chave, padrao=None):
        if chave not in self.dados:
            return padrao
        return json.loads(self.dados[chave])

    def gravar(self, chave, valor):
        self.dados[chave] = json.dumps(valor)

    def remover(self, chave):
        self.dados.pop(chave, None)


class SessaoFalsa(dict):
    modified = False


class RelogioFixo:
    def __init__(self, instante=T0):
        self.instante = instante

    def agora(self):
        return self.instante


# ====================================================================
# REPOSITÓRIOS
# ====================================================================
class ProdutoRepositoryTestCase(SimpleTestCase):

    def setUp(self):
        self.armazenamento = ArmazenamentoMemoria()
        self.repository = ProdutoRepositoryArmazenamento(self.armazenamento)

    def test_primeira_leitura_grava_produto_de_exemplo(self):
        """
        Cenário: catálogo ainda inexistente recebe o produto de exemplo.
        """
        # ACT
        produtos = self.repository.listar()

        # ASSERT
        self.assertEqual(len(produtos), 1)
        self.assertEqual(produtos[0].slug, 'intel-core-i5-12400f')
        self.assertEqual(produtos[0].preco, Decimal('899.99'))
        self.assertEqual(self.armazenamento.ler('products')[0]['name'], 'Processador Intel Core i5-12400F')

    def test_lista_vazia_gravada_nao_e_repovoada(self):
        self.repository.salvar_lista([])

        self.assertEqual(self.repository.listar(), [])

    def test_gravacao_usa_nomes_de_campo_do_formato_armazenado(self):
        produto = Produto(id='p1', nome='SSD 1TB', preco=Decimal('399.90'), slug='ssd-1tb', tags=['ssd'])

        self.repository.salvar_lista([produto])

        registro = self.armazenamento.ler('products')[0]
        self.assertEqual(registro['pathName'], 'ssd-1tb')
        self.assertEqual(registro['pPrazo'], 399.90)
        self.assertEqual(self.repository.buscar_por_id('p1'), produto)
        self.assertIsNone(self.repository.buscar_por_id('p9'))


class PedidoRepositoryTestCase(SimpleTestCase):

    def test_pedidos_sao_acumulados(self):
        # ARRANGE
        armazenamento = ArmazenamentoMemoria()
        repository = PedidoRepositoryArmazenamento(armazenamento)
        pedido = Pedido(
            nome_cliente='Ana', email_cliente='a@b.com', cpf_cliente='123.456.789-01',
            itens=[ItemPedido('p1', 'SSD', Decimal('399.90'))],
            total=Decimal('399.90'), metodo_pagamento='pix', status_pagamento='completed',
            dados_pix={'transactionId': 'tx'}, criado_em=T0,
        )

        # ACT
        repository.adicionar(pedido)
        repository.adicionar(Pedido('Bia', 'b@b.com', '1', [], Decimal('0'), 'cartao', 'completed', criado_em=T0))

        # ASSERT
        registros = armazenamento.ler('orders')
        self.assertEqual(len(registros), 2)
        self.assertEqual(registros[0]['customerName'], 'Ana')
        self.assertEqual(registros[0]['items'][0]['quantity'], 1)
        self.assertEqual(repository.buscar_por_id(pedido.id).criado_em, T0)


class ConfiguracaoPixRepositoryTestCase(SimpleTestCase):

    def test_configuracao_ausente_e_gravada(self):
        armazenamento = ArmazenamentoMemoria()
        repository = ConfiguracaoPixRepositoryArmazenamento(armazenamento)

        self.assertIsNone(repository.obter())

        repository.salvar(ConfiguracaoPix(ativo=True, client_id='id', client_secret='s'))

        self.assertEqual(armazenamento.ler('pixConfig'), {'isActive': True, 'clientId': 'id', 'clientSecret': 's'})
        self.assertTrue(repository.obter().habilitada)


class EstadoSessaoTestCase(SimpleTestCase):
    """Carrinho e checkout sobre um dicionário no lugar da sessão."""

    def setUp(self):
        self.session = SessaoFalsa()
        self.armazenamento = ArmazenamentoSessao(self.session)

    def test_carrinho_grava_itens_e_totais_separados(self):
        repository = CarrinhoRepositoryArmazenamento(self.armazenamento)
        carrinho = Carrinho(
            itens=[ItemCarrinho('p1', 'SSD', Decimal('399.90'))],
            totais=[TotalItem('p1', 2, Decimal('799.80'))],
        )

        repository.salvar(carrinho)
        lido = repository.obter()

        self.assertEqual(len(self.session['carrinho']), 1)
        self.assertEqual(self.session['carrinho_totais'][0]['valor_total'], 799.80)
        self.assertEqual(lido.total, Decimal('799.8'))

        repository.limpar()
        self.assertTrue(repository.obter().is_empty())
        self.assertNotIn('carrinho_totais', self.session)

    def test_checkout_preserva_cobranca_pix(self):
        repository = CheckoutRepositoryArmazenamento(self.armazenamento)
        cobranca = PixSimuladoGateway(RelogioFixo(), expiracao=300).gerar_cobranca(
            Decimal('10.00'), DevedorPix('Ana', '12345678901'), 'ext-1'
        )
        estado = EstadoCheckout(etapa=ETAPA_PAGAMENTO, cliente=Cliente('Ana', 'a@b.com', '1'), cobranca_pix=cobranca)

        repository.salvar(estado)
        lido = repository.obter()

        self.assertEqual(lido.etapa, ETAPA_PAGAMENTO)
        self.assertEqual(lido.cobranca_pix.criada_em, T0)
        self.assertEqual(lido.cobranca_pix.qrcode, cobranca.qrcode)
        self.assertEqual(lido.cobranca_pix.calendario.vencimento, T0 + timedelta(seconds=300))

    def test_checkout_sem_estado_comeca_na_primeira_etapa(self):
        estado = CheckoutRepositoryArmazenamento(self.armazenamento).obter()
        self.assertEqual(estado.etapa, 1)
        self.assertIsNone(estado.cobranca_pix)


@override_settings(CACHES=CACHES_TESTE)
class ArmazenamentoCacheTestCase(SimpleTestCase):

    def setUp(self):
        self.armazenamento = ArmazenamentoCache('armazenamento')
        self.armazenamento.cache.clear()

    def test_valores_gravados_como_json(self):
        self.armazenamento.gravar('orders', [{'id': '1'}])

        self.assertEqual(self.armazenamento.cache.get('orders'), '[{"id": "1"}]')
        self.assertEqual(self.armazenamento.ler('orders'), [{'id': '1'}])

    def test_valor_ilegivel_devolve_padrao(self):
        self.armazenamento.cache.set('products', '{quebrado', None)

        self.assertEqual(self.armazenamento.ler('products', []), [])

    def test_comando_carrega_catalogo_sem_duplicar(self):
        saida = StringIO()
        repository = ProdutoRepositoryArmazenamento(self.armazenamento)

        call_command('load_initial_data', stdout=saida)
        call_command('load_initial_data', stdout=saida)
        self.assertEqual(len(repository.listar()), 7)

        call_command('load_initial_data', '--limpar', stdout=saida)
        slugs = [p.slug for p in repository.listar()]
        self.assertEqual(len(slugs), len(set(slugs)))
        self.assertIn('Catálogo inicial carregado com sucesso!', saida.getvalue())


# ====================================================================
# GATEWAYS
# ====================================================================
class PixupGatewayTestCase(SimpleTestCase):

    def setUp(self):
        self.gateway = PixupGateway(RelogioFixo(), api_url='https://pix.example.com/qrcode', timeout=5)
        self.configuracao = ConfiguracaoPix(ativo=True, client_id='id', client_secret='segredo')
        self.devedor = DevedorPix(nome='Ana Souza', documento='12345678901')
        self.resposta = {
            'transactionId': 'api-123',
            'external_id': 'ext-abcdef12',
            'status': 'PENDING',
            'amount': 899.99,
            'calendar': {'expiration': 600, 'dueDate': '2024-05-10T12:10:00Z'},
            'debtor': {'name': 'Ana Souza', 'document': '12345678901'},
            'qrcode': '00020126...6304ABCD',
        }

    @patch('pcshop.infrastructure.gateways.requests.post')
    def test_cobranca_criada_a_partir_da_resposta(self, mock_post):
        # ARRANGE
        mock_post.return_value = Mock(status_code=201)
        mock_post.return_value.json.return_value = self.resposta

        # ACT
        cobranca = self.gateway.gerar_cobranca(Decimal('899.99'), self.devedor, 'ext-abcdef12', self.configuracao)

        # ASSERT
        self.assertEqual(cobranca.transaction_id, 'api-123')
        self.assertEqual(cobranca.calendario.expiracao, 600)
        self.assertEqual(cobranca.origem, 'API')
        self.assertEqual(cobranca.criada_em, T0)

        args, kwargs = mock_post.call_args
        self.assertEqual(args[0], 'https://pix.example.com/qrcode')
        self.assertEqual(kwargs['timeout'], 5)
        self.assertEqual(kwargs['json']['payerQuestion'], 'Pagamento PC Shop - Pedido abcdef12')
        self.assertEqual(kwargs['json']['payer'], {'name': 'Ana Souza', 'document': '12345678901'})
        esperado = base64.b64encode(b'id:segredo').decode('ascii')
        self.assertEqual(kwargs['headers']['Authorization'], f'Basic {esperado}')

    @patch('pcshop.infrastructure.gateways.requests.post')
    def test_erro_de_rede_vira_pagamento_falhou(self, mock_post):
        mock_post.side_effect = requests.exceptions.ConnectionError('sem rede')

        with self.assertRaises(PagamentoFalhouError):
            self.gateway.gerar_cobranca(Decimal('10'), self.devedor, 'ext', self.configuracao)

    @patch('pcshop.infrastructure.gateways.requests.post')
    def test_status_http_de_erro_vira_pagamento_falhou(self, mock_post):
        mock_post.return_value.raise_for_status.side_effect = requests.exceptions.HTTPError('401')

        with self.assertRaises(PagamentoFalhouError):
            self.gateway.gerar_cobranca(Decimal('10'), self.devedor, 'ext', self.configuracao)

    @patch('pcshop.infrastructure.gateways.requests.post')
    def test_resposta_sem_qrcode_vira_pagamento_falhou(self, mock_post):
        mock_post.return_value.json.return_value = {'transactionId': 'x', 'calendar': {'expiration': 300}}

        with self.assertRaises(PagamentoFalhouError):
            self.gateway.gerar_cobranca(Decimal('10'), self.devedor, 'ext', self.configuracao)

    @patch('pcshop.infrastructure.gateways.requests.post')
    def test_resposta_que_nao_e_json_vira_pagamento_falhou(self, mock_post):
        mock_post.return_value.json.side_effect = ValueError('Expecting value')

        with self.assertRaises(PagamentoFalhouError):
            self.gateway.gerar_cobranca(Decimal('10'), self.devedor, 'ext', self.configuracao)

    @patch('pcshop.infrastructure.gateways.requests.post')
    def test_sem_credenciais_nao_chama_a_api(self, mock_post):
        with self.assertRaises(PagamentoFalhouError):
            self.gateway.gerar_cobranca(Decimal('10'), self.devedor, 'ext', ConfiguracaoPix(ativo=True))

        mock_post.assert_not_called()


class PixSimuladoGatewayTestCase(SimpleTestCase):

    def test_payload_local(self):
        gateway = PixSimuladoGateway(RelogioFixo(), expiracao=300)

        cobranca = gateway.gerar_cobranca(
            Decimal('1799.98'), DevedorPix('Ana Souza Pereira Lima', '12345678901'), 'ext-1'
        )

        self.assertEqual(cobranca.status, 'pending')
        self.assertEqual(cobranca.external_id, 'ext-1')
        self.assertEqual(cobranca.calendario.vencimento, T0 + timedelta(seconds=300))
        self.assertTrue(cobranca.qrcode.startswith('00020126580014BR.GOV.BCB.PIX0136'))
        self.assertIn('5204000053039865401799.985802BR5913Ana Souza Per6008SAOPAULO', cobranca.qrcode)
        self.assertTrue(cobranca.qrcode.endswith('62070503***6304'))


class PagamentoCartaoSimuladoGatewayTestCase(SimpleTestCase):

    def setUp(self):
        self.gateway = PagamentoCartaoSimuladoGateway()

    def test_cartao_aprovado_guarda_so_o_final(self):
        resultado = self.gateway.processar_pagamento(
            Decimal('100'), '4111 1111 1111 1234', 'Ana Souza', '12/30', '123'
        )

        self.assertEqual(resultado.status, 'completed')
        self.assertEqual(resultado.metodo, 'cartao')
        self.assertEqual(resultado.dados_cartao, {'titular': 'Ana Souza', 'final': '1234', 'validade': '12/30'})

    def test_cartao_curto_ou_cvv_000_sao_recusados(self):
        for numero, cvv in [('4111 1111', '123'), ('4111111111111111', '000')]:
            with self.assertRaises(PagamentoFalhouError):
                self.gateway.processar_pagamento(Decimal('100'), numero, 'Ana', '12/30', cvv)
