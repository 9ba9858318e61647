from datetime import datetime, timedelta, timezone
from decimal import Decimal
from unittest.mock import patch

from django.conf import settings
from django.core.cache import caches
from django.test import Client, SimpleTestCase, override_settings

from pcshop.core import dependency_injection
from pcshop.core.entities import Produto, ConfiguracaoPix

T0 = datetime(2024, 5, 10, 12, 0, 0, tzinfo=timezone.utc)

CACHES_TESTE = {
    'default': {'BACKEND': 'django.core.cache.backends.locmem.LocMemCache', 'LOCATION': 'pcshop-views-default'},
    'armazenamento': {'BACKEND': 'django.core.cache.backends.locmem.LocMemCache', 'LOCATION': 'pcshop-views-armazenamento'},
}

DADOS_CLIENTE = {'nome': 'Maria Silva', 'email': 'maria@example.com', 'cpf': '123.456.789-01'}
DADOS_CARTAO = {'numero': '4111 1111 1111 1111', 'titular': 'MARIA SILVA', 'validade': '12/30', 'cvv': '123'}


class RelogioAjustavel:
    """Relógio de teste que só anda quando mandado."""

    def __init__(self, instante=T0):
        self.instante = instante

    def agora(self):
        return self.instante

    def avancar(self, segundos):
        self.instante = self.instante + timedelta(seconds=segundos)


@override_settings(CACHES=CACHES_TESTE, PIX_TEMPO_CONFIRMACAO=30, PIX_EXPIRACAO_PADRAO=300)
class LojaTestCase(SimpleTestCase):
    """Base: armazenamento limpo, catálogo com dois produtos e relógio fixo."""

    def setUp(self):
        caches['default'].clear()
        caches['armazenamento'].clear()

        dependency_injection.produto_repo.salvar_lista([
            Produto(id='p1', nome='Placa de Vídeo RTX 4060', categoria='placa-de-video', preco=Decimal('1999.90'), slug='placa-de-video-rtx-4060'),
            Produto(id='p2', nome='Memória DDR4 16GB', categoria='memoria-ram', preco=Decimal('299.90'), slug='memoria-ddr4-16gb'),
        ])

        self.relogio = RelogioAjustavel()
        patcher = patch('pcshop.core.dependency_injection.relogio', self.relogio)
        patcher.start()
        self.addCleanup(patcher.stop)

    def adicionar_ao_carrinho(self, produto_id='p1', quantidade=1):
        return self.client.post(f'/carrinho/adicionar/{produto_id}/', {'quantidade': quantidade})

    def preencher_dados(self, **dados):
        return self.client.post('/checkout/', {**DADOS_CLIENTE, **dados})

    def pedidos(self):
        return dependency_injection.pedido_repo.listar()


# ====================================================================
# CATÁLOGO E CARRINHO
# ====================================================================
class CatalogoCarrinhoViewsTestCase(LojaTestCase):

    def test_catalogo_lista_produtos_com_preco_formatado(self):
        response = self.client.get('/')

        self.assertEqual(response.status_code, 200)
        self.assertContains(response, 'Placa de Vídeo RTX 4060')
        self.assertContains(response, 'R$ 1.999,90')

    def test_catalogo_filtra_por_categoria(self):
        response = self.client.get('/', {'categoria': 'memoria-ram'})

        self.assertContains(response, 'Memória DDR4 16GB')
        self.assertNotContains(response, 'Placa de Vídeo RTX 4060')

    def test_adicionar_item_redireciona_para_carrinho_com_total(self):
        """
        Cenário: o total do carrinho vem da lista de totais (preço x quantidade).
        """
        # ACT
        response = self.adicionar_ao_carrinho('p1', quantidade=2)

        # ASSERT
        self.assertRedirects(response, '/carrinho/', fetch_redirect_response=False)
        pagina = self.client.get('/carrinho/')
        self.assertContains(pagina, 'R$ 3.999,80')
        self.assertContains(pagina, 'Placa de Vídeo RTX 4060')

    def test_adicionar_produto_inexistente_volta_ao_catalogo(self):
        response = self.adicionar_ao_carrinho('nao-existe')

        self.assertRedirects(response, '/', fetch_redirect_response=False)
        self.assertContains(self.client.get('/carrinho/'), 'Seu carrinho está vazio.')

    def test_remover_item_do_carrinho(self):
        self.adicionar_ao_carrinho('p1')
        self.adicionar_ao_carrinho('p2')

        response = self.client.post('/carrinho/remover/p1/')

        self.assertRedirects(response, '/carrinho/', fetch_redirect_response=False)
        pagina = self.client.get('/carrinho/')
        self.assertNotContains(pagina, '/carrinho/remover/p1/')
        self.assertContains(pagina, 'R$ 299,90')


# ====================================================================
# CHECKOUT (HTML)
# ====================================================================
class CheckoutViewsTestCase(LojaTestCase):

    def test_checkout_com_carrinho_vazio(self):
        response = self.client.get('/checkout/')

        self.assertEqual(response.status_code, 200)
        self.assertContains(response, 'Carrinho vazio')

    def test_dados_incompletos_bloqueiam_a_etapa_de_pagamento(self):
        """
        Cenário: sem e-mail o cliente continua na etapa 1 e recebe o alerta.
        """
        # ARRANGE
        self.adicionar_ao_carrinho('p1')

        # ACT
        response = self.preencher_dados(email='')

        # ASSERT
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, 'Preencha nome, e-mail e CPF para continuar.')
        self.assertRedirects(self.client.get('/checkout/pagamento/'), '/checkout/', fetch_redirect_response=False)

    def test_dados_completos_avancam_para_pagamento(self):
        self.adicionar_ao_carrinho('p1')

        response = self.preencher_dados()

        self.assertRedirects(response, '/checkout/pagamento/', fetch_redirect_response=False)
        pagina = self.client.get('/checkout/pagamento/')
        self.assertContains(pagina, 'Maria Silva')
        self.assertContains(pagina, '123.456.789-01')

    def test_fluxo_pix_simulado_cria_pedido_apos_confirmacao(self):
        """
        Cenário: sem configuração PIX a cobrança é simulada; o cronômetro
        desconta o tempo e o pagamento é dado como concluído aos 30 segundos.
        """
        # ARRANGE
        self.adicionar_ao_carrinho('p1')
        self.adicionar_ao_carrinho('p2')
        self.preencher_dados()

        # ACT: gera a cobrança
        response = self.client.post('/checkout/pix/')
        self.assertRedirects(response, '/checkout/pix/', fetch_redirect_response=False)

        # ACT: consulta ainda pendente
        self.relogio.avancar(10)
        pendente = self.client.get('/checkout/pix/')

        # ASSERT
        self.assertEqual(pendente.status_code, 200)
        self.assertContains(pendente, '04:50')
        self.assertContains(pendente, 'R$ 2.299,80')
        self.assertContains(pendente, 'http-equiv="refresh"')
        self.assertEqual(self.pedidos(), [])

        # ACT: após o tempo de confirmação
        self.relogio.avancar(20)
        concluido = self.client.get('/checkout/pix/')

        # ASSERT
        pedidos = self.pedidos()
        self.assertEqual(len(pedidos), 1)
        pedido = pedidos[0]
        self.assertRedirects(concluido, f'/checkout/sucesso/?orderId={pedido.id}', fetch_redirect_response=False)
        self.assertEqual(pedido.metodo_pagamento, 'pix')
        self.assertEqual(pedido.status_pagamento, 'completed')
        self.assertEqual(pedido.total, Decimal('2299.80'))
        self.assertEqual(pedido.criado_em, T0 + timedelta(seconds=30))
        self.assertContains(self.client.get('/carrinho/'), 'Seu carrinho está vazio.')

        sucesso = self.client.get('/checkout/sucesso/', {'orderId': pedido.id})
        self.assertContains(sucesso, pedido.id)
        self.assertContains(sucesso, 'R$ 2.299,80')

    def test_pix_sem_dados_pessoais_volta_ao_pagamento(self):
        self.adicionar_ao_carrinho('p1')

        response = self.client.post('/checkout/pix/')

        self.assertRedirects(response, '/checkout/pagamento/', fetch_redirect_response=False)

    def test_pagamento_com_cartao_aprovado(self):
        self.adicionar_ao_carrinho('p1')
        self.preencher_dados()

        response = self.client.post('/checkout/cartao/', DADOS_CARTAO)

        pedidos = self.pedidos()
        self.assertEqual(len(pedidos), 1)
        self.assertRedirects(response, f'/checkout/sucesso/?orderId={pedidos[0].id}', fetch_redirect_response=False)
        self.assertEqual(pedidos[0].metodo_pagamento, 'cartao')
        self.assertEqual(pedidos[0].dados_cartao['final'], '1111')

    def test_pagamento_com_cartao_recusado_nao_cria_pedido(self):
        self.adicionar_ao_carrinho('p1')
        self.preencher_dados()

        response = self.client.post('/checkout/cartao/', {**DADOS_CARTAO, 'cvv': '000'})

        self.assertRedirects(response, '/checkout/pagamento/', fetch_redirect_response=False)
        self.assertEqual(self.pedidos(), [])

    def test_sucesso_sem_pedido_retorna_404(self):
        self.assertEqual(self.client.get('/checkout/sucesso/').status_code, 404)
        self.assertEqual(self.client.get('/checkout/sucesso/', {'orderId': 'nao-existe'}).status_code, 404)


# ====================================================================
# PAINEL
# ====================================================================
class PainelViewsTestCase(LojaTestCase):

    def test_criar_produto_gera_slug_a_partir_do_nome(self):
        dados = {'nome': 'Fonte Corsair 650W 80 Plus', 'categoria': 'fonte', 'preco': '459.90', 'tags': 'fonte, corsair,'}

        response = self.client.post('/painel/produtos/novo/', dados)

        self.assertRedirects(response, '/painel/produtos/', fetch_redirect_response=False)
        criado = next(p for p in dependency_injection.produto_repo.listar() if p.nome == dados['nome'])
        self.assertEqual(criado.slug, 'fonte-corsair-650w-80-plus')
        self.assertEqual(criado.tags, ['fonte', 'corsair'])

    def test_produto_sem_nome_nao_e_criado(self):
        response = self.client.post('/painel/produtos/novo/', {'nome': '', 'preco': '10'})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(dependency_injection.produto_repo.listar()), 2)

    def test_editar_produto_substitui_registro(self):
        dados = {'nome': 'Memória DDR4 32GB', 'categoria': 'memoria-ram', 'preco': '549.90', 'slug': 'memoria-ddr4-32gb'}

        response = self.client.post('/painel/produtos/p2/editar/', dados)

        self.assertRedirects(response, '/painel/produtos/', fetch_redirect_response=False)
        produto = dependency_injection.produto_repo.buscar_por_id('p2')
        self.assertEqual(produto.nome, 'Memória DDR4 32GB')
        self.assertEqual(produto.preco, Decimal('549.90'))

    def test_excluir_exige_confirmacao(self):
        sem_confirmacao = self.client.post('/painel/produtos/p1/excluir/')
        self.assertRedirects(sem_confirmacao, '/painel/produtos/p1/excluir/', fetch_redirect_response=False)
        self.assertIsNotNone(dependency_injection.produto_repo.buscar_por_id('p1'))

        confirmado = self.client.post('/painel/produtos/p1/excluir/', {'confirmar': 'sim'})
        self.assertRedirects(confirmado, '/painel/produtos/', fetch_redirect_response=False)
        self.assertIsNone(dependency_injection.produto_repo.buscar_por_id('p1'))

    def test_editar_produto_inexistente_retorna_404(self):
        self.assertEqual(self.client.get('/painel/produtos/nao-existe/editar/').status_code, 404)

    def test_configuracao_pix_mantem_segredo_em_branco(self):
        dependency_injection.configuracao_pix_repo.salvar(ConfiguracaoPix(ativo=True, client_id='id', client_secret='segredo'))

        response = self.client.post('/painel/pix/', {'ativo': 'on', 'client_id': ' novo-id ', 'client_secret': ''})

        self.assertRedirects(response, '/painel/pix/', fetch_redirect_response=False)
        configuracao = dependency_injection.configuracao_pix_repo.obter()
        self.assertEqual(configuracao.client_id, 'novo-id')
        self.assertEqual(configuracao.client_secret, 'segredo')
        self.assertNotContains(self.client.get('/painel/pix/'), 'segredo"')


# ====================================================================
# API
# ====================================================================
class ApiTestCase(LojaTestCase):

    def test_listar_e_criar_produtos(self):
        lista = self.client.get('/api/produtos/')
        self.assertEqual(lista.status_code, 200)
        self.assertEqual(len(lista.json()), 2)

        criado = self.client.post(
            '/api/produtos/',
            {'nome': 'SSD NVMe 1TB', 'preco': '399.90', 'categoria': 'ssd'},
            content_type='application/json',
        )

        self.assertEqual(criado.status_code, 201)
        self.assertEqual(criado.json()['slug'], 'ssd-nvme-1tb')

    def test_atualizar_produto_pela_api(self):
        """
        Cenário: PUT substitui o registro inteiro; slug em branco volta a ser
        gerado a partir do novo nome.
        """
        # ACT
        response = self.client.put(
            '/api/produtos/p2/',
            {'nome': 'Novo Nome X', 'preco': '349.90', 'categoria': 'memoria-ram', 'slug': ''},
            content_type='application/json',
        )

        # ASSERT
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['id'], 'p2')
        self.assertEqual(response.json()['slug'], 'novo-nome-x')
        produto = dependency_injection.produto_repo.buscar_por_id('p2')
        self.assertEqual(produto.preco, Decimal('349.90'))
        self.assertEqual(len(dependency_injection.produto_repo.listar()), 2)

    def test_atualizar_produto_inexistente_pela_api(self):
        response = self.client.put(
            '/api/produtos/nao-existe/', {'nome': 'X', 'preco': '1.00'}, content_type='application/json'
        )

        self.assertEqual(response.status_code, 404)

    def test_excluir_produto_pela_api_exige_confirmacao(self):
        sem_confirmacao = self.client.delete('/api/produtos/p1/')
        self.assertEqual(sem_confirmacao.status_code, 400)

        confirmado = self.client.delete('/api/produtos/p1/?confirmar=true')
        self.assertEqual(confirmado.status_code, 204)

        self.assertEqual(self.client.get('/api/produtos/p1/').status_code, 404)

    def test_carrinho_api_adiciona_e_remove(self):
        adicionado = self.client.post('/api/carrinho/', {'produto_id': 'p1', 'quantidade': 2}, content_type='application/json')

        self.assertEqual(adicionado.status_code, 201)
        self.assertEqual(adicionado.json()['total'], '3999.80')
        self.assertEqual(adicionado.json()['totais'][0]['quantidade'], 2)

        removido = self.client.delete('/api/carrinho/', {'produto_id': 'p1'}, content_type='application/json')

        self.assertEqual(removido.status_code, 200)
        self.assertEqual(removido.json()['itens'], [])
        self.assertEqual(removido.json()['total'], '0.00')

    def test_carrinho_api_delete_sem_produto_esvazia_o_carrinho(self):
        self.client.post('/api/carrinho/', {'produto_id': 'p1'}, content_type='application/json')
        self.client.post('/api/carrinho/', {'produto_id': 'p2', 'quantidade': 3}, content_type='application/json')

        response = self.client.delete('/api/carrinho/', {}, content_type='application/json')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['itens'], [])
        self.assertEqual(response.json()['totais'], [])
        self.assertEqual(response.json()['total'], '0.00')

    def test_carrinho_api_produto_inexistente(self):
        response = self.client.post('/api/carrinho/', {'produto_id': 'nao-existe'}, content_type='application/json')

        self.assertEqual(response.status_code, 404)

    def test_fluxo_pix_pela_api(self):
        """
        Cenário: POST gera a cobrança; o GET que encontra o pagamento
        concluído cria o pedido e devolve o seu ID.
        """
        # ARRANGE
        self.client.post('/api/carrinho/', {'produto_id': 'p2'}, content_type='application/json')
        cliente = self.client.post('/api/checkout/cliente/', DADOS_CLIENTE, content_type='application/json')
        self.assertEqual(cliente.json()['etapa'], 2)

        # ACT
        gerado = self.client.post('/api/checkout/pix/', {}, content_type='application/json')

        # ASSERT
        self.assertEqual(gerado.status_code, 201)
        self.assertEqual(gerado.json()['origem'], 'SIMULADO')
        self.assertEqual(gerado.json()['expiracao'], 300)

        self.relogio.avancar(5)
        pendente = self.client.get('/api/checkout/pix/').json()
        self.assertEqual(pendente['status'], 'pending')
        self.assertEqual(pendente['tempo_formatado'], '04:55')
        self.assertNotIn('pedido_id', pendente)

        self.relogio.avancar(25)
        concluido = self.client.get('/api/checkout/pix/').json()
        self.assertEqual(concluido['status'], 'completed')

        pedido = self.client.get(f"/api/pedidos/{concluido['pedido_id']}/")
        self.assertEqual(pedido.status_code, 200)
        self.assertEqual(pedido.json()['total'], '299.90')
        self.assertEqual(pedido.json()['metodo_pagamento'], 'pix')

    def test_pix_api_sem_cpf_valido(self):
        self.client.post('/api/carrinho/', {'produto_id': 'p2'}, content_type='application/json')
        self.client.post('/api/checkout/cliente/', DADOS_CLIENTE, content_type='application/json')

        response = self.client.post('/api/checkout/pix/', {'cpf': '123'}, content_type='application/json')

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['message'], 'Preencha nome e CPF válidos')

    def test_cartao_api_cria_pedido(self):
        self.client.post('/api/carrinho/', {'produto_id': 'p1'}, content_type='application/json')
        self.client.post('/api/checkout/cliente/', DADOS_CLIENTE, content_type='application/json')

        response = self.client.post('/api/checkout/cartao/', DADOS_CARTAO, content_type='application/json')

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()['status_pagamento'], 'completed')
        self.assertEqual(len(self.pedidos()), 1)
        self.assertEqual(self.client.get('/api/checkout/').json()['etapa'], 1)

    def test_checkout_api_dados_incompletos(self):
        self.client.post('/api/carrinho/', {'produto_id': 'p1'}, content_type='application/json')

        response = self.client.post('/api/checkout/cliente/', {'nome': 'Maria'}, content_type='application/json')

        self.assertEqual(response.status_code, 400)
        self.assertEqual(self.client.get('/api/checkout/').json()['etapa'], 1)

    def test_pedido_inexistente(self):
        self.assertEqual(self.client.get('/api/pedidos/nao-existe/').status_code, 404)

    def test_schema_da_api(self):
        self.assertEqual(self.client.get('/api/schema/').status_code, 200)


# ====================================================================
# ESTADO DO CLIENTE NO NAVEGADOR
# ====================================================================
class SessaoNoNavegadorTestCase(LojaTestCase):
    """
    Carrinho e checkout vivem no cookie de sessão assinado de cada cliente,
    com o SESSION_ENGINE do projeto.
    """

    def test_sessao_usa_cookie_assinado(self):
        self.assertEqual(settings.SESSION_ENGINE, 'django.contrib.sessions.backends.signed_cookies')

    def test_carrinho_sobrevive_a_muitos_outros_clientes(self):
        """
        Cenário: centenas de outros clientes montam carrinhos; o carrinho
        do primeiro cliente continua intacto.
        """
        # ARRANGE
        self.client.post('/api/carrinho/', {'produto_id': 'p1'}, content_type='application/json')

        # ACT
        for _ in range(301):
            Client().post('/api/carrinho/', {'produto_id': 'p2'}, content_type='application/json')

        # ASSERT
        carrinho = self.client.get('/api/carrinho/').json()
        self.assertEqual(carrinho['total'], '1999.90')
        self.assertEqual([item['produto_id'] for item in carrinho['itens']], ['p1'])

    def test_estado_do_checkout_independe_do_cache_do_servidor(self):
        """
        Cenário: o cache do servidor é esvaziado (reinício) no meio do checkout
        com PIX pendente; carrinho, etapa e cobrança continuam no cliente.
        """
        # ARRANGE
        self.adicionar_ao_carrinho('p2')
        self.preencher_dados()
        self.client.post('/api/checkout/pix/', {}, content_type='application/json')

        # ACT
        caches['default'].clear()
        self.relogio.avancar(10)
        status = self.client.get('/api/checkout/pix/').json()

        # ASSERT
        self.assertEqual(status['status'], 'pending')
        self.assertEqual(status['tempo_formatado'], '04:50')
        estado = self.client.get('/api/checkout/').json()
        self.assertEqual(estado['etapa'], 2)
        self.assertEqual(self.client.get('/api/carrinho/').json()['total'], '299.90')
