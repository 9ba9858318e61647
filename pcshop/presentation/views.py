from django.views import View
from django.urls import reverse
from django.shortcuts import render, redirect
from django.http import Http404
from django.contrib import messages
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status

from pcshop.core.dependency_injection import (
    get_gerenciar_produtos_use_case,
    get_gerenciar_carrinho_use_case,
    get_sequenciador_checkout_use_case,
    get_consultar_pedido_use_case,
    get_gerar_pix_use_case,
    get_processar_cartao_use_case,
)
from pcshop.core.entities import CATEGORIAS, ETAPA_PAGAMENTO, rotulo_categoria
from pcshop.core.exceptions import (
    BaseErroCore,
    DadosInvalidosError,
    ItemNaoEncontradoError,
    CarrinhoVazioError,
    EtapaInvalidaError,
    PagamentoFalhouError,
)
from pcshop.core.formatacao import formatar_moeda, formatar_tempo

from .cart_manager import CartManager
from .forms import AdicionarItemCarrinhoForm, DadosClienteForm, DadosCartaoForm
from .serializers import (
    CarrinhoSerializer,
    AdicionarItemCarrinhoSerializer,
    RemoverItemCarrinhoSerializer,
    ClienteSerializer,
    EstadoCheckoutSerializer,
    GerarPixSerializer,
    CobrancaPixSerializer,
    StatusPixSerializer,
    CartaoSerializer,
    PedidoSerializer,
)


# ====================================================================
# VIEWS: Orquestram a requisição, a execução dos casos de uso e a resposta.
# ====================================================================

def resposta_erro(erro: BaseErroCore) -> Response:
    """Erros do Core na API: 404 para itens ausentes, 400 para o resto."""
    if isinstance(erro, ItemNaoEncontradoError):
        return Response({'message': erro.message}, status=status.HTTP_404_NOT_FOUND)
    return Response({'message': erro.message}, status=status.HTTP_400_BAD_REQUEST)


def url_sucesso(pedido) -> str:
    return f"{reverse('checkout_sucesso')}?orderId={pedido.id}"


# ====================================================================
# CATÁLOGO E CARRINHO
# ====================================================================

class CatalogoView(View):
    """
    Página inicial: vitrine com todos os produtos, filtrável por categoria.
    """
    template_name = 'catalog/lista_produtos.html'

    def get(self, request):
        categoria = request.GET.get('categoria', '')
        produtos = get_gerenciar_produtos_use_case().listar()
        if categoria:
            produtos = [p for p in produtos if p.categoria == categoria]

        context = {
            'produtos': produtos,
            'categorias': [(c, rotulo_categoria(c)) for c in CATEGORIAS],
            'categoria_selecionada': categoria,
        }
        return render(request, self.template_name, context)


class CarrinhoView(View):
    template_name = 'carrinho/carrinho.html'

    def get(self, request):
        return render(request, self.template_name, CartManager(request).get_carrinho_context())


class AdicionarAoCarrinhoView(View):
    """Adiciona um produto ao carrinho e volta para o carrinho."""

    def post(self, request, produto_id):
        form = AdicionarItemCarrinhoForm(request.POST)
        if not form.is_valid():
            messages.error(request, "Quantidade inválida.")
            return redirect('catalogo')

        try:
            carrinho = CartManager(request).add_item(produto_id, form.cleaned_data['quantidade'])
            item = carrinho.get_item(produto_id)
            messages.success(request, f"{item.nome} adicionado ao carrinho!")
        except BaseErroCore as e:
            messages.error(request, e.message)
            return redirect('catalogo')

        return redirect('carrinho')


class RemoverDoCarrinhoView(View):

    def post(self, request, produto_id):
        try:
            CartManager(request).remove_item(produto_id)
            messages.success(request, "Item removido do carrinho!")
        except ItemNaoEncontradoError as e:
            messages.error(request, e.message)
        return redirect('carrinho')


# ====================================================================
# CHECKOUT (duas etapas: dados pessoais -> pagamento)
# ====================================================================

class CheckoutView(View):
    """
    Etapa 1 do checkout: identificação do cliente.
    Com o carrinho vazio, exibe a página de carrinho vazio.
    """
    template_name = 'checkout/dados_pessoais.html'
    template_vazio = 'checkout/carrinho_vazio.html'

    def get(self, request):
        sequenciador = get_sequenciador_checkout_use_case(request.session)
        try:
            carrinho = sequenciador.obter_carrinho()
        except CarrinhoVazioError:
            return render(request, self.template_vazio)

        estado = sequenciador.obter_estado()
        form = DadosClienteForm(initial={
            'nome': estado.cliente.nome,
            'email': estado.cliente.email,
            'cpf': estado.cliente.cpf,
        })
        return render(request, self.template_name, {'form': form, 'carrinho': carrinho, 'etapa': estado.etapa})

    def post(self, request):
        sequenciador = get_sequenciador_checkout_use_case(request.session)
        form = DadosClienteForm(request.POST)
        form.is_valid()  # sem campos obrigatórios; a presença é validada no sequenciador
        dados = form.cleaned_data

        try:
            sequenciador.enviar_dados_cliente(dados.get('nome', ''), dados.get('email', ''), dados.get('cpf', ''))
        except CarrinhoVazioError:
            return render(request, self.template_vazio)
        except DadosInvalidosError as e:
            messages.error(request, e.message)
            context = {'form': form, 'carrinho': sequenciador.obter_carrinho(), 'etapa': 1}
            return render(request, self.template_name, context)

        return redirect('checkout_pagamento')


class PagamentoView(View):
    """Etapa 2: escolha entre PIX e cartão."""
    template_name = 'checkout/pagamento.html'

    def get(self, request):
        sequenciador = get_sequenciador_checkout_use_case(request.session)
        try:
            carrinho = sequenciador.obter_carrinho()
        except CarrinhoVazioError:
            return redirect('checkout')

        estado = sequenciador.obter_estado()
        if estado.etapa != ETAPA_PAGAMENTO:
            messages.error(request, "Preencha nome, e-mail e CPF para continuar.")
            return redirect('checkout')

        context = {
            'carrinho': carrinho,
            'cliente': estado.cliente,
            'form_cartao': DadosCartaoForm(),
        }
        return render(request, self.template_name, context)


class PixView(View):
    """
    POST gera a cobrança PIX; GET exibe o QR Code e o cronômetro.
    A página se recarrega até o pagamento ser dado como concluído,
    quando o pedido é criado e o cliente segue para a confirmação.
    """
    template_name = 'checkout/pix.html'

    def post(self, request):
        sequenciador = get_sequenciador_checkout_use_case(request.session)
        try:
            carrinho = sequenciador.obter_carrinho()
            cliente = sequenciador.obter_estado().cliente
            get_gerar_pix_use_case(request.session).gerar(carrinho.total, cliente.nome, cliente.cpf)
        except CarrinhoVazioError:
            return redirect('checkout')
        except (DadosInvalidosError, EtapaInvalidaError) as e:
            messages.error(request, e.message)
            return redirect('checkout_pagamento')

        return redirect('checkout_pix')

    def get(self, request):
        try:
            situacao = get_gerar_pix_use_case(request.session).consultar()
        except ItemNaoEncontradoError:
            return redirect('checkout_pagamento')

        if situacao.concluido:
            try:
                pedido = get_sequenciador_checkout_use_case(request.session).concluir_pagamento(situacao.resultado)
            except (CarrinhoVazioError, EtapaInvalidaError) as e:
                messages.error(request, e.message)
                return redirect('checkout')
            messages.success(request, "Pagamento PIX confirmado!")
            return redirect(url_sucesso(pedido))

        context = {
            'cobranca': situacao.cobranca,
            'valor_formatado': formatar_moeda(situacao.cobranca.valor),
            'tempo_restante': formatar_tempo(situacao.tempo_restante),
            'intervalo_atualizacao': 5,
        }
        return render(request, self.template_name, context)


class CartaoView(View):
    """Pagamento com cartão simulado; aprovado, conclui o checkout."""

    def post(self, request):
        form = DadosCartaoForm(request.POST)
        if not form.is_valid():
            messages.error(request, "Preencha todos os dados do cartão.")
            return redirect('checkout_pagamento')

        sequenciador = get_sequenciador_checkout_use_case(request.session)
        try:
            carrinho = sequenciador.obter_carrinho()
            resultado = get_processar_cartao_use_case(request.session).executar(
                carrinho.total,
                form.cleaned_data['numero'],
                form.cleaned_data['titular'],
                form.cleaned_data['validade'],
                form.cleaned_data['cvv'],
            )
            pedido = sequenciador.concluir_pagamento(resultado)
        except CarrinhoVazioError:
            return redirect('checkout')
        except (PagamentoFalhouError, EtapaInvalidaError) as e:
            messages.error(request, e.message)
            return redirect('checkout_pagamento')

        messages.success(request, "Pagamento com cartão aprovado!")
        return redirect(url_sucesso(pedido))


class SucessoView(View):
    template_name = 'checkout/sucesso.html'

    def get(self, request):
        pedido_id = request.GET.get('orderId', '')
        if not pedido_id:
            raise Http404("Pedido não informado.")

        try:
            pedido = get_consultar_pedido_use_case().executar(pedido_id)
        except ItemNaoEncontradoError:
            raise Http404("Pedido não encontrado.")

        return render(request, self.template_name, {'pedido': pedido})


# ====================================================================
# API (Django REST Framework)
# ====================================================================

class CarrinhoAPIView(APIView):
    """
    API View para o carrinho da sessão atual.
    """
    serializer_class = CarrinhoSerializer

    def get(self, request):
        carrinho = get_gerenciar_carrinho_use_case(request.session).obter()
        return Response(CarrinhoSerializer(carrinho).data)

    def post(self, request):
        """
        Adiciona um item ao carrinho.
        """
        serializer = AdicionarItemCarrinhoSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        try:
            carrinho = get_gerenciar_carrinho_use_case(request.session).adicionar(
                serializer.validated_data['produto_id'],
                serializer.validated_data['quantidade'],
            )
        except BaseErroCore as e:
            return resposta_erro(e)
        return Response(CarrinhoSerializer(carrinho).data, status=status.HTTP_201_CREATED)

    def delete(self, request):
        """
        Remove um item (com produto_id) ou esvazia o carrinho (sem produto_id).
        """
        serializer = RemoverItemCarrinhoSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        use_case = get_gerenciar_carrinho_use_case(request.session)

        produto_id = serializer.validated_data.get('produto_id')
        if not produto_id:
            use_case.limpar()
            return Response(CarrinhoSerializer(use_case.obter()).data)

        try:
            carrinho = use_case.remover(produto_id)
        except ItemNaoEncontradoError as e:
            return resposta_erro(e)
        return Response(CarrinhoSerializer(carrinho).data)


class CheckoutAPIView(APIView):
    """Estado do checkout da sessão (etapa, cliente e cobrança PIX)."""
    serializer_class = EstadoCheckoutSerializer

    def get(self, request):
        estado = get_sequenciador_checkout_use_case(request.session).obter_estado()
        return Response(EstadoCheckoutSerializer(estado).data)


class DadosClienteAPIView(APIView):
    serializer_class = ClienteSerializer

    def post(self, request):
        serializer = ClienteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        dados = serializer.validated_data

        try:
            estado = get_sequenciador_checkout_use_case(request.session).enviar_dados_cliente(
                dados['nome'], dados['email'], dados['cpf']
            )
        except BaseErroCore as e:
            return resposta_erro(e)
        return Response(EstadoCheckoutSerializer(estado).data)


class PixAPIView(APIView):
    """
    POST gera a cobrança PIX da sessão; GET devolve o cronômetro e o status.
    Quando o status chega a 'completed', o pedido é criado nesta mesma chamada.
    """
    serializer_class = StatusPixSerializer

    def post(self, request):
        serializer = GerarPixSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        sequenciador = get_sequenciador_checkout_use_case(request.session)
        try:
            carrinho = sequenciador.obter_carrinho()
            cliente = sequenciador.obter_estado().cliente
            cobranca = get_gerar_pix_use_case(request.session).gerar(
                carrinho.total,
                serializer.validated_data.get('nome') or cliente.nome,
                serializer.validated_data.get('cpf') or cliente.cpf,
            )
        except BaseErroCore as e:
            return resposta_erro(e)
        return Response(CobrancaPixSerializer(cobranca).data, status=status.HTTP_201_CREATED)

    def get(self, request):
        try:
            situacao = get_gerar_pix_use_case(request.session).consultar()
        except ItemNaoEncontradoError as e:
            return resposta_erro(e)

        dados = StatusPixSerializer(situacao).data
        if situacao.concluido:
            try:
                pedido = get_sequenciador_checkout_use_case(request.session).concluir_pagamento(situacao.resultado)
            except BaseErroCore as e:
                return resposta_erro(e)
            dados['pedido_id'] = pedido.id
        return Response(dados)


class CartaoAPIView(APIView):
    serializer_class = CartaoSerializer

    def post(self, request):
        serializer = CartaoSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        dados = serializer.validated_data

        sequenciador = get_sequenciador_checkout_use_case(request.session)
        try:
            carrinho = sequenciador.obter_carrinho()
            resultado = get_processar_cartao_use_case(request.session).executar(
                carrinho.total, dados['numero'], dados['titular'], dados['validade'], dados['cvv']
            )
            pedido = sequenciador.concluir_pagamento(resultado)
        except BaseErroCore as e:
            return resposta_erro(e)
        return Response(PedidoSerializer(pedido).data, status=status.HTTP_201_CREATED)


class PedidoAPIView(APIView):
    serializer_class = PedidoSerializer

    def get(self, request, pedido_id):
        try:
            pedido = get_consultar_pedido_use_case().executar(pedido_id)
        except ItemNaoEncontradoError as e:
            return resposta_erro(e)
        return Response(PedidoSerializer(pedido).data)
