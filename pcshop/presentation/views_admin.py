# pcshop/presentation/views_admin.py
"""
Views para o painel de administração (catálogo e configuração PIX).
"""

from django.views.generic import View
from django.shortcuts import render, redirect
from django.contrib import messages
from django.http import Http404
from rest_framework import viewsets, status
from rest_framework.response import Response

from pcshop.core.dependency_injection import get_gerenciar_produtos_use_case, get_configurar_pix_use_case
from pcshop.core.exceptions import BaseErroCore, ProdutoNaoEncontradoError
from .forms import ProdutoForm, ConfiguracaoPixForm
from .serializers import ProdutoSerializer
from .views import resposta_erro


def _buscar_produto(produto_id):
    try:
        return get_gerenciar_produtos_use_case().buscar(produto_id)
    except ProdutoNaoEncontradoError:
        raise Http404("Produto não encontrado.")


# ====================================================================
# GERENCIAMENTO DE PRODUTOS
# ====================================================================

class GerenciarProdutosView(View):
    """
    View para listagem e gerenciamento de produtos.
    """
    template_name = 'painel/produtos_lista.html'

    def get(self, request):
        produtos = get_gerenciar_produtos_use_case().listar()
        return render(request, self.template_name, {'produtos': produtos})


class AdicionarProdutoView(View):
    """
    View para adicionar um novo produto. O slug é gerado a partir do nome.
    """
    template_name = 'painel/produto_form.html'

    def get(self, request):
        return render(request, self.template_name, {'form': ProdutoForm(), 'criando': True})

    def post(self, request):
        form = ProdutoForm(request.POST)
        if form.is_valid():
            try:
                produto = get_gerenciar_produtos_use_case().criar(form.cleaned_data)
                messages.success(request, f'Produto "{produto.nome}" adicionado com sucesso!')
                return redirect('painel_produtos')
            except BaseErroCore as e:
                messages.error(request, e.message)

        return render(request, self.template_name, {'form': form, 'criando': True})


class EditarProdutoView(View):
    """
    View para editar um produto existente (o registro é substituído por inteiro).
    """
    template_name = 'painel/produto_form.html'

    def get(self, request, produto_id):
        produto = _buscar_produto(produto_id)
        form = ProdutoForm(initial=ProdutoForm.initial_de(produto))
        return render(request, self.template_name, {'form': form, 'produto': produto, 'criando': False})

    def post(self, request, produto_id):
        produto = _buscar_produto(produto_id)
        form = ProdutoForm(request.POST)
        if form.is_valid():
            try:
                get_gerenciar_produtos_use_case().atualizar(produto_id, form.cleaned_data)
                messages.success(request, 'Produto atualizado com sucesso!')
                return redirect('painel_produtos')
            except BaseErroCore as e:
                messages.error(request, e.message)

        return render(request, self.template_name, {'form': form, 'produto': produto, 'criando': False})


class ExcluirProdutoView(View):
    """
    GET pede a confirmação; POST com 'confirmar' exclui o produto.
    """
    template_name = 'painel/produto_excluir.html'

    def get(self, request, produto_id):
        return render(request, self.template_name, {'produto': _buscar_produto(produto_id)})

    def post(self, request, produto_id):
        confirmado = request.POST.get('confirmar') in ('1', 'true', 'on', 'sim')
        try:
            get_gerenciar_produtos_use_case().deletar(produto_id, confirmado=confirmado)
            messages.success(request, 'Produto excluído com sucesso!')
        except ProdutoNaoEncontradoError:
            raise Http404("Produto não encontrado.")
        except BaseErroCore as e:
            messages.error(request, e.message)
            return redirect('painel_excluir_produto', produto_id=produto_id)

        return redirect('painel_produtos')


# ====================================================================
# CONFIGURAÇÃO DO PROVEDOR PIX
# ====================================================================

class ConfiguracaoPixView(View):
    template_name = 'painel/configuracao_pix.html'

    def get(self, request):
        configuracao = get_configurar_pix_use_case().obter()
        initial = {}
        if configuracao:
            initial = {'ativo': configuracao.ativo, 'client_id': configuracao.client_id}
        context = {
            'form': ConfiguracaoPixForm(initial=initial),
            'segredo_salvo': bool(configuracao and configuracao.client_secret),
        }
        return render(request, self.template_name, context)

    def post(self, request):
        form = ConfiguracaoPixForm(request.POST)
        if form.is_valid():
            get_configurar_pix_use_case().salvar(
                form.cleaned_data['ativo'],
                form.cleaned_data['client_id'],
                form.cleaned_data['client_secret'],
            )
            messages.success(request, 'Configuração PIX salva com sucesso!')
            return redirect('painel_pix')

        return render(request, self.template_name, {'form': form, 'segredo_salvo': False})


# ====================================================================
# API DE PRODUTOS
# ====================================================================

class ProdutoViewSet(viewsets.ViewSet):
    """
    API ViewSet para gerenciar produtos.
    A exclusão exige '?confirmar=true'.
    """
    serializer_class = ProdutoSerializer
    lookup_field = 'produto_id'

    def list(self, request):
        produtos = get_gerenciar_produtos_use_case().listar()
        return Response(ProdutoSerializer(produtos, many=True).data)

    def retrieve(self, request, produto_id=None):
        try:
            produto = get_gerenciar_produtos_use_case().buscar(produto_id)
        except BaseErroCore as e:
            return resposta_erro(e)
        return Response(ProdutoSerializer(produto).data)

    def create(self, request):
        serializer = ProdutoSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            produto = get_gerenciar_produtos_use_case().criar(serializer.validated_data)
        except BaseErroCore as e:
            return resposta_erro(e)
        return Response(ProdutoSerializer(produto).data, status=status.HTTP_201_CREATED)

    def update(self, request, produto_id=None):
        serializer = ProdutoSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            produto = get_gerenciar_produtos_use_case().atualizar(produto_id, serializer.validated_data)
        except BaseErroCore as e:
            return resposta_erro(e)
        return Response(ProdutoSerializer(produto).data)

    def destroy(self, request, produto_id=None):
        confirmado = request.query_params.get('confirmar', '').lower() in ('1', 'true', 'sim')
        try:
            get_gerenciar_produtos_use_case().deletar(produto_id, confirmado=confirmado)
        except BaseErroCore as e:
            return resposta_erro(e)
        return Response(status=status.HTTP_204_NO_CONTENT)
