"""
Define as URLs da camada de apresentação (a loja e o painel) e as rotas de API REST.
"""
from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views, views_admin

# Configuração do Router para ViewSets (API REST)
router = DefaultRouter()
router.register(r'produtos', views_admin.ProdutoViewSet, basename='produto')


urlpatterns = [
    # ====================================================================
    # 1. ROTAS DA LOJA (CATÁLOGO E CARRINHO)
    # ====================================================================
    path('', views.CatalogoView.as_view(), name='catalogo'),
    path('carrinho/', views.CarrinhoView.as_view(), name='carrinho'),
    path('carrinho/adicionar/<str:produto_id>/', views.AdicionarAoCarrinhoView.as_view(), name='adicionar_carrinho'),
    path('carrinho/remover/<str:produto_id>/', views.RemoverDoCarrinhoView.as_view(), name='remover_carrinho'),

    # ====================================================================
    # 2. ROTAS DE CHECKOUT
    # ====================================================================
    path('checkout/', views.CheckoutView.as_view(), name='checkout'),
    path('checkout/pagamento/', views.PagamentoView.as_view(), name='checkout_pagamento'),
    path('checkout/pix/', views.PixView.as_view(), name='checkout_pix'),
    path('checkout/cartao/', views.CartaoView.as_view(), name='checkout_cartao'),
    path('checkout/sucesso/', views.SucessoView.as_view(), name='checkout_sucesso'),

    # ====================================================================
    # 3. ROTAS DO PAINEL
    # ====================================================================
    path('painel/produtos/', views_admin.GerenciarProdutosView.as_view(), name='painel_produtos'),
    path('painel/produtos/novo/', views_admin.AdicionarProdutoView.as_view(), name='painel_novo_produto'),
    path('painel/produtos/<str:produto_id>/editar/', views_admin.EditarProdutoView.as_view(), name='painel_editar_produto'),
    path('painel/produtos/<str:produto_id>/excluir/', views_admin.ExcluirProdutoView.as_view(), name='painel_excluir_produto'),
    path('painel/pix/', views_admin.ConfiguracaoPixView.as_view(), name='painel_pix'),

    # ====================================================================
    # 4. ROTAS DE API (Django REST Framework)
    # ====================================================================
    path('api/', include(router.urls)),  # /api/produtos/
    path('api/carrinho/', views.CarrinhoAPIView.as_view(), name='api_carrinho'),
    path('api/checkout/', views.CheckoutAPIView.as_view(), name='api_checkout'),
    path('api/checkout/cliente/', views.DadosClienteAPIView.as_view(), name='api_checkout_cliente'),
    path('api/checkout/pix/', views.PixAPIView.as_view(), name='api_checkout_pix'),
    path('api/checkout/cartao/', views.CartaoAPIView.as_view(), name='api_checkout_cartao'),
    path('api/pedidos/<str:pedido_id>/', views.PedidoAPIView.as_view(), name='api_pedido'),
]
