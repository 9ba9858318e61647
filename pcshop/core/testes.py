# pcshop/core/testes.py

import unittest
from unittest.mock import Mock
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from pcshop.core.use_cases import (
    GerenciarProdutosUseCase,
    GerenciarCarrinhoUseCase,
    SequenciadorCheckoutUseCase,
    ConsultarPedidoUseCase,
    GerarPixUseCase,
    ProcessarCartaoUseCase,
    ConfigurarPixUseCase,
)
from pcshop.core.entities import (
    Produto, Carrinho, ItemCarrinho, TotalItem, Cliente, EstadoCheckout, Pedido,
    CobrancaPix, CalendarioPix, DevedorPix, ConfiguracaoPix, ResultadoPagamento,
    rotulo_categoria, ETAPA_DADOS_PESSOAIS, ETAPA_PAGAMENTO,
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
from pcshop.core.formatacao import gerar_slug, formatar_cpf, formatar_moeda, formatar_tempo

T0 = datetime(2024, 5, 10, 12, 0, 0, tzinfo=timezone.utc)


def _cobranca(criada_em=T0, origem='SIMULADO', transaction_id='tx-1'):
    return CobrancaPix(
        transaction_id=transaction_id,
        external_id='ext-1',
        status='pending',
        valor=Decimal('899.99'),
        calendario=CalendarioPix(expiracao=300, vencimento=criada_em + timedelta(seconds=300)),
        devedor=DevedorPix(nome='Ana Souza', documento='12345678901'),
        qrcode='000201...6304',
        criada_em=criada_em,
        origem=origem,
    )


# ====================================================================
# FORMATAÇÃO
# ====================================================================
class TestFormatacao(unittest.TestCase):

    def test_slug_so_tem_minusculas_digitos_e_hifen(self):
        self.assertEqual(gerar_slug('Processador Intel Core i5-12400F'), 'processador-intel-core-i5-12400f')
        self.assertEqual(gerar_slug('Placa   de Vídeo  RTX'), 'placa-de-vdeo-rtx')
        self.assertEqual(gerar_slug('SSD 1TB (NVMe)!'), 'ssd-1tb-nvme')

    def test_slug_e_deterministico_e_vazio_para_nome_vazio(self):
        self.assertEqual(gerar_slug('Fonte 650W'), gerar_slug('Fonte 650W'))
        self.assertEqual(gerar_slug(''), '')

    def test_cpf_com_onze_digitos_recebe_mascara(self):
        self.assertEqual(formatar_cpf('12345678901'), '123.456.789-01')
        self.assertEqual(formatar_cpf('123.456.789-01'), '123.456.789-01')

    def test_cpf_incompleto_fica_so_com_digitos(self):
        self.assertEqual(formatar_cpf('123.45'), '12345')

    def test_cpf_com_mais_de_onze_digitos_fica_inalterado(self):
        self.assertEqual(formatar_cpf('123456789012'), '123456789012')

    def test_moeda_e_cronometro(self):
        self.assertEqual(formatar_moeda(Decimal('1234.5')), 'R$ 1.234,50')
        self.assertEqual(formatar_tempo(300), '05:00')
        self.assertEqual(formatar_tempo(-5), '00:00')

    def test_rotulo_categoria_troca_so_o_primeiro_hifen(self):
        self.assertEqual(rotulo_categoria('placa-mae'), 'PLACA MAE')
        self.assertEqual(rotulo_categoria('placa-de-video'), 'PLACA DE-VIDEO')


# ====================================================================
# CATÁLOGO
# ====================================================================
class TestGerenciarProdutos(unittest.TestCase):

    def setUp(self):
        self.produto_repo_mock = Mock()
        self.use_case = GerenciarProdutosUseCase(produto_repo=self.produto_repo_mock)

        self.p1 = Produto(id='p1', nome='Fonte 650W', preco=Decimal('379.90'), slug='fonte-650w')
        self.p2 = Produto(id='p2', nome='SSD 1TB', preco=Decimal('399.90'), slug='ssd-1tb')
        self.p3 = Produto(id='p3', nome='Gabinete', preco=Decimal('259.90'), slug='gabinete')

    def test_criar_produto_gera_id_e_slug(self):
        # ARRANGE
        self.produto_repo_mock.listar.return_value = [self.p1]

        # ACT
        produto = self.use_case.criar({
            'nome': 'Placa de Vídeo RTX 4060',
            'categoria': 'placa-de-video',
            'preco': '2199.99',
            'tags': ['nvidia', 'gaming'],
        })

        # ASSERT
        self.assertEqual(produto.slug, 'placa-de-vdeo-rtx-4060')
        self.assertEqual(produto.preco, Decimal('2199.99'))
        self.assertTrue(produto.id)
        self.produto_repo_mock.salvar_lista.assert_called_once_with([self.p1, produto])

    def test_criar_produto_com_preco_invalido_falha(self):
        self.produto_repo_mock.listar.return_value = []

        with self.assertRaises(DadosInvalidosError):
            self.use_case.criar({'nome': 'Fonte', 'preco': 'abc'})

        self.produto_repo_mock.salvar_lista.assert_not_called()

    def test_atualizar_mantem_id_e_substitui_registro(self):
        # ARRANGE
        self.produto_repo_mock.listar.return_value = [self.p1, self.p2]

        # ACT
        atualizado = self.use_case.atualizar('p2', {'nome': 'SSD 2TB', 'preco': 599, 'slug': ''})

        # ASSERT
        self.assertEqual(atualizado.id, 'p2')
        self.assertEqual(atualizado.slug, 'ssd-2tb')
        self.produto_repo_mock.salvar_lista.assert_called_once_with([self.p1, atualizado])

    def test_atualizar_produto_inexistente_falha(self):
        self.produto_repo_mock.listar.return_value = [self.p1]

        with self.assertRaises(ProdutoNaoEncontradoError):
            self.use_case.atualizar('p9', {'nome': 'X'})

    def test_deletar_remove_somente_o_produto_indicado(self):
        # ARRANGE
        self.produto_repo_mock.listar.return_value = [self.p1, self.p2, self.p3]

        # ACT
        self.use_case.deletar('p2', confirmado=True)

        # ASSERT
        self.produto_repo_mock.salvar_lista.assert_called_once_with([self.p1, self.p3])

    def test_deletar_sem_confirmacao_nao_altera_catalogo(self):
        with self.assertRaises(ConfirmacaoNecessariaError):
            self.use_case.deletar('p2')

        self.produto_repo_mock.salvar_lista.assert_not_called()

    def test_deletar_produto_inexistente_falha(self):
        self.produto_repo_mock.listar.return_value = [self.p1]

        with self.assertRaises(ProdutoNaoEncontradoError):
            self.use_case.deletar('p9', confirmado=True)

    def test_buscar_produto_inexistente_falha(self):
        self.produto_repo_mock.buscar_por_id.return_value = None

        with self.assertRaises(ProdutoNaoEncontradoError):
            self.use_case.buscar('p9')


# ====================================================================
# CARRINHO
# ====================================================================
class TestGerenciarCarrinho(unittest.TestCase):

    def setUp(self):
        self.carrinho_repo_mock = Mock()
        self.produto_repo_mock = Mock()
        self.carrinho_repo_mock.salvar.side_effect = lambda carrinho: carrinho

        self.use_case = GerenciarCarrinhoUseCase(
            carrinho_repo=self.carrinho_repo_mock,
            produto_repo=self.produto_repo_mock
        )
        self.produto = Produto(id='p1', nome='Processador i5', preco=Decimal('899.99'), slug='i5')

    def test_adicionar_item_registra_item_e_total(self):
        # ARRANGE
        self.produto_repo_mock.buscar_por_id.return_value = self.produto
        self.carrinho_repo_mock.obter.return_value = Carrinho()

        # ACT
        carrinho = self.use_case.adicionar('p1', quantidade=2)

        # ASSERT
        self.assertEqual(len(carrinho.itens), 1)
        self.assertEqual(carrinho.totais[0].valor_total, Decimal('1799.98'))
        self.assertEqual(carrinho.total, Decimal('1799.98'))
        self.carrinho_repo_mock.salvar.assert_called_once_with(carrinho)

    def test_adicionar_quantidade_invalida_falha(self):
        with self.assertRaises(DadosInvalidosError):
            self.use_case.adicionar('p1', quantidade=0)

        self.carrinho_repo_mock.salvar.assert_not_called()

    def test_adicionar_produto_inexistente_falha(self):
        self.produto_repo_mock.buscar_por_id.return_value = None

        with self.assertRaises(ProdutoNaoEncontradoError):
            self.use_case.adicionar('p9')

    def test_remover_item_remove_tambem_o_total(self):
        # ARRANGE
        self.carrinho_repo_mock.obter.return_value = Carrinho(
            itens=[ItemCarrinho('p1', 'i5', Decimal('899.99')), ItemCarrinho('p2', 'SSD', Decimal('399.90'))],
            totais=[TotalItem('p1', 1, Decimal('899.99')), TotalItem('p2', 1, Decimal('399.90'))],
        )

        # ACT
        carrinho = self.use_case.remover('p1')

        # ASSERT
        self.assertEqual([i.produto_id for i in carrinho.itens], ['p2'])
        self.assertEqual(carrinho.total, Decimal('399.90'))

    def test_remover_item_ausente_falha(self):
        self.carrinho_repo_mock.obter.return_value = Carrinho()

        with self.assertRaises(ItemNaoEncontradoError):
            self.use_case.remover('p1')

        self.carrinho_repo_mock.salvar.assert_not_called()

    def test_total_vem_da_lista_de_totais(self):
        carrinho = Carrinho(
            itens=[ItemCarrinho('p1', 'i5', Decimal('899.99'))],
            totais=[TotalItem('p1', 3, Decimal('2699.97'))],
        )
        self.assertEqual(carrinho.total, Decimal('2699.97'))
        self.assertEqual(Carrinho().total, Decimal('0'))


# ====================================================================
# CHECKOUT
# ====================================================================
class TestSequenciadorCheckout(unittest.TestCase):

    def setUp(self):
        self.carrinho_repo_mock = Mock()
        self.checkout_repo_mock = Mock()
        self.pedido_repo_mock = Mock()
        self.relogio_mock = Mock()
        self.relogio_mock.agora.return_value = T0
        self.checkout_repo_mock.salvar.side_effect = lambda estado: estado

        self.use_case = SequenciadorCheckoutUseCase(
            carrinho_repo=self.carrinho_repo_mock,
            checkout_repo=self.checkout_repo_mock,
            pedido_repo=self.pedido_repo_mock,
            relogio=self.relogio_mock
        )

        self.carrinho = Carrinho(
            itens=[ItemCarrinho('p1', 'i5', Decimal('899.99')), ItemCarrinho('p2', 'SSD', Decimal('399.90'))],
            totais=[TotalItem('p1', 1, Decimal('899.99')), TotalItem('p2', 2, Decimal('799.80'))],
        )
        self.resultado = ResultadoPagamento(
            metodo='pix', status='completed', transaction_id='tx-1',
            dados_pix={'transactionId': 'tx-1', 'qrcode': 'qr', 'status': 'completed'}
        )

    def test_dados_completos_avancam_para_pagamento(self):
        # ARRANGE
        self.carrinho_repo_mock.obter.return_value = self.carrinho
        self.checkout_repo_mock.obter.return_value = EstadoCheckout()

        # ACT
        estado = self.use_case.enviar_dados_cliente('Ana Souza', 'ana@example.com', '12345678901')

        # ASSERT
        self.assertEqual(estado.etapa, ETAPA_PAGAMENTO)
        self.assertEqual(estado.cliente.cpf, '123.456.789-01')

    def test_campo_vazio_mantem_etapa_de_dados_pessoais(self):
        self.carrinho_repo_mock.obter.return_value = self.carrinho
        self.checkout_repo_mock.obter.return_value = EstadoCheckout()

        for nome, email, cpf in [('', 'a@b.com', '123'), ('Ana', '', '123'), ('Ana', 'a@b.com', '')]:
            with self.assertRaises(DadosObrigatoriosError):
                self.use_case.enviar_dados_cliente(nome, email, cpf)

            estado_salvo = self.checkout_repo_mock.salvar.call_args[0][0]
            self.assertEqual(estado_salvo.etapa, ETAPA_DADOS_PESSOAIS)

    def test_checkout_com_carrinho_vazio_falha(self):
        self.carrinho_repo_mock.obter.return_value = Carrinho()

        with self.assertRaises(CarrinhoVazioError):
            self.use_case.enviar_dados_cliente('Ana', 'a@b.com', '12345678901')

    def test_concluir_pagamento_cria_um_pedido_e_limpa_carrinho(self):
        # ARRANGE
        self.carrinho_repo_mock.obter.return_value = self.carrinho
        self.checkout_repo_mock.obter.return_value = EstadoCheckout(
            etapa=ETAPA_PAGAMENTO,
            cliente=Cliente('Ana Souza', 'ana@example.com', '123.456.789-01'),
        )

        # ACT
        pedido = self.use_case.concluir_pagamento(self.resultado)

        # ASSERT
        self.pedido_repo_mock.adicionar.assert_called_once_with(pedido)
        self.carrinho_repo_mock.limpar.assert_called_once()
        self.checkout_repo_mock.limpar.assert_called_once()

        self.assertEqual(pedido.total, Decimal('1699.79'))  # soma da lista de totais
        self.assertEqual([i.quantidade for i in pedido.itens], [1, 1])
        self.assertEqual(pedido.metodo_pagamento, 'pix')
        self.assertEqual(pedido.status_pagamento, 'completed')
        self.assertEqual(pedido.criado_em, T0)

    def test_concluir_pagamento_fora_da_etapa_falha(self):
        self.checkout_repo_mock.obter.return_value = EstadoCheckout()

        with self.assertRaises(EtapaInvalidaError):
            self.use_case.concluir_pagamento(self.resultado)

        self.pedido_repo_mock.adicionar.assert_not_called()


class TestConsultarPedido(unittest.TestCase):

    def test_pedido_inexistente_falha(self):
        pedido_repo_mock = Mock()
        pedido_repo_mock.buscar_por_id.return_value = None

        with self.assertRaises(PedidoNaoEncontradoError):
            ConsultarPedidoUseCase(pedido_repo_mock).executar('x')


# ====================================================================
# PAGAMENTO PIX
# ====================================================================
class TestGerarPix(unittest.TestCase):

    def setUp(self):
        self.checkout_repo_mock = Mock()
        self.config_repo_mock = Mock()
        self.gateway_pix_mock = Mock()
        self.gateway_simulado_mock = Mock()
        self.relogio_mock = Mock()
        self.relogio_mock.agora.return_value = T0

        self.estado = EstadoCheckout(etapa=ETAPA_PAGAMENTO, cliente=Cliente('Ana Souza', 'a@b.com', '123.456.789-01'))
        self.checkout_repo_mock.obter.return_value = self.estado
        self.gateway_simulado_mock.gerar_cobranca.return_value = _cobranca()

        self.use_case = GerarPixUseCase(
            checkout_repo=self.checkout_repo_mock,
            configuracao_repo=self.config_repo_mock,
            gateway_pix=self.gateway_pix_mock,
            gateway_simulado=self.gateway_simulado_mock,
            relogio=self.relogio_mock,
            tempo_confirmacao=30
        )

    def test_sem_configuracao_usa_simulacao(self):
        # ARRANGE
        self.config_repo_mock.obter.return_value = None

        # ACT
        cobranca = self.use_case.gerar(Decimal('899.99'), 'Ana Souza', '123.456.789-01')

        # ASSERT
        self.gateway_pix_mock.gerar_cobranca.assert_not_called()
        self.assertEqual(cobranca.origem, 'SIMULADO')
        self.assertIs(self.estado.cobranca_pix, cobranca)
        self.checkout_repo_mock.salvar.assert_called_once_with(self.estado)

    def test_configuracao_inativa_usa_simulacao(self):
        self.config_repo_mock.obter.return_value = ConfiguracaoPix(ativo=False, client_id='id', client_secret='s')

        self.use_case.gerar(Decimal('899.99'), 'Ana Souza', '12345678901')

        self.gateway_pix_mock.gerar_cobranca.assert_not_called()
        self.gateway_simulado_mock.gerar_cobranca.assert_called_once()

    def test_falha_do_provedor_cai_na_simulacao(self):
        # ARRANGE
        self.config_repo_mock.obter.return_value = ConfiguracaoPix(ativo=True, client_id='id', client_secret='s')
        self.gateway_pix_mock.gerar_cobranca.side_effect = PagamentoFalhouError("timeout")

        # ACT
        cobranca = self.use_case.gerar(Decimal('899.99'), 'Ana Souza', '12345678901')

        # ASSERT
        self.assertEqual(cobranca.origem, 'SIMULADO')
        self.gateway_simulado_mock.gerar_cobranca.assert_called_once()

    def test_provedor_disponivel_usa_resposta_da_api(self):
        # ARRANGE
        configuracao = ConfiguracaoPix(ativo=True, client_id='id', client_secret='s')
        self.config_repo_mock.obter.return_value = configuracao
        self.gateway_pix_mock.gerar_cobranca.return_value = _cobranca(origem='API', transaction_id='api-1')

        # ACT
        cobranca = self.use_case.gerar(Decimal('899.99'), 'Ana Souza', '123.456.789-01')

        # ASSERT
        self.assertEqual(cobranca.transaction_id, 'api-1')
        self.gateway_simulado_mock.gerar_cobranca.assert_not_called()
        valor, devedor, external_id, config = self.gateway_pix_mock.gerar_cobranca.call_args[0]
        self.assertEqual(devedor.documento, '12345678901')
        self.assertIs(config, configuracao)

    def test_nome_ou_cpf_invalidos_falham(self):
        for nome, cpf in [('   ', '12345678901'), ('Ana', '1234')]:
            with self.assertRaises(DadosInvalidosError):
                self.use_case.gerar(Decimal('10'), nome, cpf)

        self.gateway_simulado_mock.gerar_cobranca.assert_not_called()

    def test_gerar_fora_da_etapa_de_pagamento_falha(self):
        self.estado.etapa = ETAPA_DADOS_PESSOAIS

        with self.assertRaises(EtapaInvalidaError):
            self.use_case.gerar(Decimal('10'), 'Ana', '12345678901')

    def test_consulta_antes_do_prazo_continua_pendente(self):
        # ARRANGE
        self.estado.cobranca_pix = _cobranca()
        self.relogio_mock.agora.return_value = T0 + timedelta(seconds=10)

        # ACT
        status = self.use_case.consultar()

        # ASSERT
        self.assertFalse(status.concluido)
        self.assertEqual(status.tempo_restante, 290)
        self.assertIsNone(status.resultado)

    def test_consulta_apos_prazo_conclui_nos_dois_caminhos(self):
        for origem in ('API', 'SIMULADO'):
            self.estado.cobranca_pix = _cobranca(origem=origem)
            self.relogio_mock.agora.return_value = T0 + timedelta(seconds=30)

            status = self.use_case.consultar()

            self.assertTrue(status.concluido)
            self.assertEqual(status.resultado.metodo, 'pix')
            self.assertEqual(status.resultado.status, 'completed')
            self.assertEqual(status.resultado.dados_pix['transactionId'], 'tx-1')

    def test_cronometro_nao_fica_negativo(self):
        self.estado.cobranca_pix = _cobranca()
        self.relogio_mock.agora.return_value = T0 + timedelta(seconds=900)

        self.assertEqual(self.use_case.consultar().tempo_restante, 0)

    def test_consulta_sem_cobranca_falha(self):
        with self.assertRaises(ItemNaoEncontradoError):
            self.use_case.consultar()


# ====================================================================
# CARTÃO E CONFIGURAÇÃO PIX
# ====================================================================
class TestProcessarCartao(unittest.TestCase):

    def setUp(self):
        self.checkout_repo_mock = Mock()
        self.gateway_cartao_mock = Mock()
        self.use_case = ProcessarCartaoUseCase(self.checkout_repo_mock, self.gateway_cartao_mock)

    def test_cartao_exige_etapa_de_pagamento(self):
        self.checkout_repo_mock.obter.return_value = EstadoCheckout()

        with self.assertRaises(EtapaInvalidaError):
            self.use_case.executar(Decimal('10'), '4111111111111111', 'Ana', '12/30', '123')

        self.gateway_cartao_mock.processar_pagamento.assert_not_called()

    def test_cartao_delega_ao_gateway(self):
        self.checkout_repo_mock.obter.return_value = EstadoCheckout(etapa=ETAPA_PAGAMENTO)

        self.use_case.executar(Decimal('10'), '4111111111111111', 'Ana', '12/30', '123')

        self.gateway_cartao_mock.processar_pagamento.assert_called_once_with(
            Decimal('10'), '4111111111111111', 'Ana', '12/30', '123'
        )


class TestConfigurarPix(unittest.TestCase):

    def setUp(self):
        self.config_repo_mock = Mock()
        self.config_repo_mock.salvar.side_effect = lambda configuracao: configuracao
        self.use_case = ConfigurarPixUseCase(self.config_repo_mock)

    def test_segredo_em_branco_mantem_o_atual(self):
        self.config_repo_mock.obter.return_value = ConfiguracaoPix(True, 'id-antigo', 'segredo')

        configuracao = self.use_case.salvar(True, ' id-novo ', '')

        self.assertEqual(configuracao.client_id, 'id-novo')
        self.assertEqual(configuracao.client_secret, 'segredo')

    def test_primeira_configuracao(self):
        self.config_repo_mock.obter.return_value = None

        configuracao = self.use_case.salvar(False, 'id', 'novo')

        self.assertFalse(configuracao.habilitada)
        self.assertEqual(configuracao.client_secret, 'novo')


if __name__ == '__main__':
    unittest.main()
