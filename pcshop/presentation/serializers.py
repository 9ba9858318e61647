from rest_framework import serializers

from pcshop.core.entities import CATEGORIAS
from pcshop.core.formatacao import formatar_tempo


# ====================================================================
# SERIALIZERS DO CATÁLOGO
# ====================================================================

class ProdutoSerializer(serializers.Serializer):
    """
    Serializer do Produto (entrada e saída da API de catálogo).
    Trabalha sobre a entidade do Core; não há model do Django por trás.
    """
    id = serializers.CharField(read_only=True)
    nome = serializers.CharField(max_length=200)
    categoria = serializers.ChoiceField(choices=CATEGORIAS, required=False, allow_blank=True)
    fabricante = serializers.CharField(max_length=100, required=False, allow_blank=True)
    modelo = serializers.CharField(max_length=100, required=False, allow_blank=True)
    preco = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)
    preco_formatado = serializers.CharField(read_only=True)
    img = serializers.CharField(max_length=500, required=False, allow_blank=True)
    img2 = serializers.CharField(max_length=500, required=False, allow_blank=True)
    slug = serializers.CharField(max_length=200, required=False, allow_blank=True)
    garantia = serializers.CharField(max_length=50, required=False, allow_blank=True)
    promo = serializers.BooleanField(required=False, default=False)
    destaque = serializers.BooleanField(required=False, default=False)
    specs = serializers.ListField(child=serializers.JSONField(), required=False, default=list)
    tags = serializers.ListField(child=serializers.CharField(allow_blank=True), required=False, default=list)


# ====================================================================
# SERIALIZERS PARA O CARRINHO
# ====================================================================

class ItemCarrinhoSerializer(serializers.Serializer):
    produto_id = serializers.CharField()
    nome = serializers.CharField()
    preco = serializers.DecimalField(max_digits=10, decimal_places=2)
    img = serializers.CharField()
    slug = serializers.CharField()


class TotalItemSerializer(serializers.Serializer):
    produto_id = serializers.CharField()
    quantidade = serializers.IntegerField()
    valor_total = serializers.DecimalField(max_digits=12, decimal_places=2)


class CarrinhoSerializer(serializers.Serializer):
    """
    Serializer principal do carrinho.
    O total vem da lista de totais, exposta ao lado dos itens.
    """
    itens = ItemCarrinhoSerializer(many=True, read_only=True)
    totais = TotalItemSerializer(many=True, read_only=True)
    total = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    total_formatado = serializers.CharField(read_only=True)


class AdicionarItemCarrinhoSerializer(serializers.Serializer):
    produto_id = serializers.CharField()
    quantidade = serializers.IntegerField(min_value=1, required=False, default=1)


class RemoverItemCarrinhoSerializer(serializers.Serializer):
    produto_id = serializers.CharField(required=False)


# ====================================================================
# SERIALIZERS DE CHECKOUT E PAGAMENTO
# ====================================================================

class ClienteSerializer(serializers.Serializer):
    """Campos opcionais: a validação de presença fica no sequenciador."""
    nome = serializers.CharField(max_length=200, required=False, allow_blank=True, default='')
    email = serializers.CharField(max_length=254, required=False, allow_blank=True, default='')
    cpf = serializers.CharField(max_length=14, required=False, allow_blank=True, default='')


class CobrancaPixSerializer(serializers.Serializer):
    transaction_id = serializers.CharField()
    external_id = serializers.CharField()
    status = serializers.CharField()
    valor = serializers.DecimalField(max_digits=12, decimal_places=2)
    qrcode = serializers.CharField()
    origem = serializers.CharField()
    expiracao = serializers.IntegerField(source='calendario.expiracao')
    vencimento = serializers.DateTimeField(source='calendario.vencimento')
    devedor_nome = serializers.CharField(source='devedor.nome')
    devedor_documento = serializers.CharField(source='devedor.documento')


class EstadoCheckoutSerializer(serializers.Serializer):
    etapa = serializers.IntegerField()
    cliente = ClienteSerializer()
    cobranca_pix = CobrancaPixSerializer(allow_null=True)


class GerarPixSerializer(serializers.Serializer):
    """Nome e CPF opcionais; por padrão vêm dos dados pessoais do checkout."""
    nome = serializers.CharField(max_length=200, required=False, allow_blank=True)
    cpf = serializers.CharField(max_length=14, required=False, allow_blank=True)


class StatusPixSerializer(serializers.Serializer):
    status = serializers.CharField()
    tempo_restante = serializers.IntegerField()
    tempo_formatado = serializers.SerializerMethodField()
    cobranca = CobrancaPixSerializer()

    def get_tempo_formatado(self, obj) -> str:
        return formatar_tempo(obj.tempo_restante)


class CartaoSerializer(serializers.Serializer):
    numero = serializers.CharField(max_length=23)
    titular = serializers.CharField(max_length=100)
    validade = serializers.CharField(max_length=7)
    cvv = serializers.CharField(min_length=3, max_length=4)


# ====================================================================
# SERIALIZERS DE PEDIDO
# ====================================================================

class ItemPedidoSerializer(serializers.Serializer):
    produto_id = serializers.CharField()
    nome = serializers.CharField()
    preco = serializers.DecimalField(max_digits=10, decimal_places=2)
    quantidade = serializers.IntegerField()


class PedidoSerializer(serializers.Serializer):
    id = serializers.CharField()
    nome_cliente = serializers.CharField()
    email_cliente = serializers.CharField()
    cpf_cliente = serializers.CharField()
    itens = ItemPedidoSerializer(many=True)
    total = serializers.DecimalField(max_digits=12, decimal_places=2)
    metodo_pagamento = serializers.CharField()
    status_pagamento = serializers.CharField()
    dados_cartao = serializers.JSONField(allow_null=True)
    dados_pix = serializers.JSONField(allow_null=True)
    criado_em = serializers.DateTimeField(allow_null=True)
