"""
Mapeadores (Mappers) para converter entre:
1. Registros JSON do armazenamento chave-valor (nomes de campo do formato gravado)
2. Entidades de Domínio (pcshop.core.entities)
"""
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Optional

from django.utils.dateparse import parse_datetime

from pcshop.core.entities import (
    Produto, Carrinho, ItemCarrinho, TotalItem, Cliente, EstadoCheckout,
    Pedido, ItemPedido, CobrancaPix, CalendarioPix, DevedorPix, ConfiguracaoPix,
    ETAPA_DADOS_PESSOAIS,
)


def para_decimal(valor: Any) -> Decimal:
    """Números são gravados como float; a leitura volta para Decimal via str."""
    return Decimal(str(valor if valor not in (None, '') else 0))


def para_data(valor: Optional[str]) -> Optional[datetime]:
    if not valor:
        return None
    return parse_datetime(valor)


# ====================================================================
# MAPPERS DO CATÁLOGO
# ====================================================================

class ProdutoMapper:
    """Registro da chave 'products' <-> Produto."""

    @staticmethod
    def to_entity(dados: Dict[str, Any]) -> Produto:
        return Produto(
            id=dados.get('id') or '',
            nome=dados.get('name') or '',
            categoria=dados.get('categoria') or '',
            fabricante=dados.get('fabricante') or '',
            modelo=dados.get('modelo') or '',
            preco=para_decimal(dados.get('pPrazo')),
            img=dados.get('img') or '',
            img2=dados.get('img2') or '',
            slug=dados.get('pathName') or '',
            garantia=dados.get('garantia') or '',
            promo=bool(dados.get('promo')),
            destaque=bool(dados.get('destaque')),
            specs=list(dados.get('specs') or []),
            tags=list(dados.get('tags') or []),
        )

    @staticmethod
    def to_model(produto: Produto) -> Dict[str, Any]:
        return {
            'id': produto.id,
            'name': produto.nome,
            'categoria': produto.categoria,
            'fabricante': produto.fabricante,
            'modelo': produto.modelo,
            'pPrazo': float(produto.preco),
            'img': produto.img,
            'img2': produto.img2,
            'pathName': produto.slug,
            'garantia': produto.garantia,
            'promo': produto.promo,
            'destaque': produto.destaque,
            'specs': produto.specs,
            'tags': produto.tags,
        }


# ====================================================================
# MAPPERS DE PEDIDO E PAGAMENTO
# ====================================================================

class PedidoMapper:
    """Registro da chave 'orders' <-> Pedido."""

    @staticmethod
    def to_entity(dados: Dict[str, Any]) -> Pedido:
        return Pedido(
            id=dados.get('id') or '',
            nome_cliente=dados.get('customerName') or '',
            email_cliente=dados.get('customerEmail') or '',
            cpf_cliente=dados.get('customerCpf') or '',
            itens=[
                ItemPedido(
                    produto_id=item.get('id') or '',
                    nome=item.get('name') or '',
                    preco=para_decimal(item.get('price')),
                    quantidade=int(item.get('quantity') or 1),
                )
                for item in dados.get('items') or []
            ],
            total=para_decimal(dados.get('total')),
            metodo_pagamento=dados.get('paymentMethod') or '',
            status_pagamento=dados.get('paymentStatus') or '',
            dados_cartao=dados.get('cardData'),
            dados_pix=dados.get('pixData'),
            criado_em=para_data(dados.get('createdAt')),
        )

    @staticmethod
    def to_model(pedido: Pedido) -> Dict[str, Any]:
        return {
            'id': pedido.id,
            'customerName': pedido.nome_cliente,
            'customerEmail': pedido.email_cliente,
            'customerCpf': pedido.cpf_cliente,
            'items': [
                {
                    'id': item.produto_id,
                    'name': item.nome,
                    'price': float(item.preco),
                    'quantity': item.quantidade,
                }
                for item in pedido.itens
            ],
            'total': float(pedido.total),
            'paymentMethod': pedido.metodo_pagamento,
            'paymentStatus': pedido.status_pagamento,
            'cardData': pedido.dados_cartao,
            'pixData': pedido.dados_pix,
            'createdAt': pedido.criado_em.isoformat() if pedido.criado_em else None,
        }


class ConfiguracaoPixMapper:
    """Registro da chave 'pixConfig' <-> ConfiguracaoPix."""

    @staticmethod
    def to_entity(dados: Dict[str, Any]) -> ConfiguracaoPix:
        return ConfiguracaoPix(
            ativo=bool(dados.get('isActive')),
            client_id=dados.get('clientId') or '',
            client_secret=dados.get('clientSecret') or '',
        )

    @staticmethod
    def to_model(configuracao: ConfiguracaoPix) -> Dict[str, Any]:
        return {
            'isActive': configuracao.ativo,
            'clientId': configuracao.client_id,
            'clientSecret': configuracao.client_secret,
        }


class CobrancaPixMapper:
    """
    Resposta do provedor PIX (e estado gravado na sessão) <-> CobrancaPix.
    A sessão usa o mesmo formato da resposta, mais 'createdAt' e 'origem'.
    """

    @staticmethod
    def to_entity(dados: Dict[str, Any], criada_em: datetime = None, origem: str = None) -> CobrancaPix:
        calendario = dados.get('calendar') or {}
        devedor = dados.get('debtor') or {}
        criada_em = criada_em or para_data(dados.get('createdAt'))
        return CobrancaPix(
            transaction_id=str(dados.get('transactionId') or ''),
            external_id=str(dados.get('external_id') or ''),
            status=dados.get('status') or '',
            valor=para_decimal(dados.get('amount')),
            calendario=CalendarioPix(
                expiracao=int(calendario.get('expiration') or 0),
                vencimento=para_data(calendario.get('dueDate')),
            ),
            devedor=DevedorPix(
                nome=devedor.get('name') or '',
                documento=devedor.get('document') or '',
            ),
            qrcode=dados.get('qrcode') or '',
            criada_em=criada_em,
            origem=origem or dados.get('origem') or 'SIMULADO',
        )

    @staticmethod
    def to_model(cobranca: CobrancaPix) -> Dict[str, Any]:
        vencimento = cobranca.calendario.vencimento
        return {
            'transactionId': cobranca.transaction_id,
            'external_id': cobranca.external_id,
            'status': cobranca.status,
            'amount': float(cobranca.valor),
            'calendar': {
                'expiration': cobranca.calendario.expiracao,
                'dueDate': vencimento.isoformat() if vencimento else None,
            },
            'debtor': {
                'name': cobranca.devedor.nome,
                'document': cobranca.devedor.documento,
            },
            'qrcode': cobranca.qrcode,
            'createdAt': cobranca.criada_em.isoformat() if cobranca.criada_em else None,
            'origem': cobranca.origem,
        }


# ====================================================================
# MAPPERS DO ESTADO DO CLIENTE (SESSÃO)
# ====================================================================

class CarrinhoMapper:
    """
    O carrinho ocupa duas chaves da sessão: a lista de itens exibidos e a
    lista de totais, gravadas lado a lado e nunca reconciliadas.
    """

    @staticmethod
    def to_entity(itens: list, totais: list) -> Carrinho:
        return Carrinho(
            itens=[
                ItemCarrinho(
                    produto_id=item['produto_id'],
                    nome=item.get('nome') or '',
                    preco=para_decimal(item.get('preco')),
                    img=item.get('img') or '',
                    slug=item.get('slug') or '',
                )
                for item in itens or []
            ],
            totais=[
                TotalItem(
                    produto_id=total['produto_id'],
                    quantidade=int(total.get('quantidade') or 1),
                    valor_total=para_decimal(total.get('valor_total')),
                )
                for total in totais or []
            ],
        )

    @staticmethod
    def to_model(carrinho: Carrinho):
        itens = [
            {
                'produto_id': item.produto_id,
                'nome': item.nome,
                'preco': float(item.preco),
                'img': item.img,
                'slug': item.slug,
            }
            for item in carrinho.itens
        ]
        totais = [
            {
                'produto_id': total.produto_id,
                'quantidade': total.quantidade,
                'valor_total': float(total.valor_total),
            }
            for total in carrinho.totais
        ]
        return itens, totais


class EstadoCheckoutMapper:

    @staticmethod
    def to_entity(dados: Optional[Dict[str, Any]]) -> EstadoCheckout:
        if not dados:
            return EstadoCheckout()
        cliente = dados.get('cliente') or {}
        cobranca = dados.get('cobranca_pix')
        return EstadoCheckout(
            etapa=int(dados.get('etapa') or ETAPA_DADOS_PESSOAIS),
            cliente=Cliente(
                nome=cliente.get('nome') or '',
                email=cliente.get('email') or '',
                cpf=cliente.get('cpf') or '',
            ),
            cobranca_pix=CobrancaPixMapper.to_entity(cobranca) if cobranca else None,
        )

    @staticmethod
    def to_model(estado: EstadoCheckout) -> Dict[str, Any]:
        return {
            'etapa': estado.etapa,
            'cliente': {
                'nome': estado.cliente.nome,
                'email': estado.cliente.email,
                'cpf': estado.cliente.cpf,
            },
            'cobranca_pix': CobrancaPixMapper.to_model(estado.cobranca_pix) if estado.cobranca_pix else None,
        }
