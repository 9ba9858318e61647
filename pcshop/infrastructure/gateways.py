import base64
import logging
import uuid
from datetime import timedelta
from decimal import Decimal
from typing import Optional

import requests
from django.conf import settings

from pcshop.core.entities import (
    CobrancaPix, CalendarioPix, DevedorPix, ConfiguracaoPix, ResultadoPagamento,
    STATUS_PIX_PENDENTE, STATUS_PAGAMENTO_CONCLUIDO,
)
from pcshop.core.exceptions import PagamentoFalhouError
from pcshop.core.formatacao import somente_digitos
from pcshop.core.ports import IGatewayPix, IGatewayCartao, IRelogio

from .mappers import CobrancaPixMapper

logger = logging.getLogger(__name__)


# ====================================================================
# GATEWAYS: Implementações concretas de pagamento (API externa e simulações).
# ====================================================================

class PixupGateway(IGatewayPix):
    """
    Gateway para a API de QR Code PIX da PixUp.
    Qualquer falha vira PagamentoFalhouError; quem chama decide o fallback.
    """

    def __init__(self, relogio: IRelogio, api_url: str = None, timeout: int = None):
        self.relogio = relogio
        self.api_url = api_url or settings.PIX_API_URL
        self.timeout = timeout or settings.PIX_API_TIMEOUT

    @staticmethod
    def _cabecalhos(configuracao: ConfiguracaoPix) -> dict:
        credenciais = f"{configuracao.client_id}:{configuracao.client_secret}"
        token = base64.b64encode(credenciais.encode('utf-8')).decode('ascii')
        return {
            'accept': 'application/json',
            'content-type': 'application/json',
            'Authorization': f'Basic {token}',
        }

    def gerar_cobranca(self, valor: Decimal, devedor: DevedorPix, external_id: str,
                       configuracao: Optional[ConfiguracaoPix] = None) -> CobrancaPix:
        if not configuracao or not configuracao.habilitada:
            raise PagamentoFalhouError("Provedor PIX sem configuração ativa.")

        payload = {
            'amount': float(valor),
            'external_id': external_id,
            'payerQuestion': f"Pagamento PC Shop - Pedido {external_id[-8:]}",
            'payer': {
                'name': devedor.nome,
                'document': devedor.documento,
            },
        }

        try:
            response = requests.post(
                self.api_url, json=payload, headers=self._cabecalhos(configuracao), timeout=self.timeout
            )
            response.raise_for_status()
            dados = response.json()
        except requests.exceptions.RequestException as e:
            raise PagamentoFalhouError(f"Erro de conexão com a API PIX: {e}")
        except ValueError:
            raise PagamentoFalhouError("Resposta da API PIX não é um JSON válido.")

        try:
            cobranca = CobrancaPixMapper.to_entity(dados, criada_em=self.relogio.agora(), origem='API')
        except (AttributeError, TypeError, ValueError, ArithmeticError) as e:
            raise PagamentoFalhouError(f"Resposta da API PIX em formato inesperado: {e}")

        if not cobranca.qrcode or cobranca.calendario.expiracao <= 0:
            raise PagamentoFalhouError("Resposta da API PIX sem QR Code ou prazo de expiração.")

        return cobranca


class PixSimuladoGateway(IGatewayPix):
    """Fabrica localmente uma cobrança PIX com payload no formato BR Code (sem CRC)."""

    def __init__(self, relogio: IRelogio, expiracao: int = None):
        self.relogio = relogio
        self.expiracao = expiracao or settings.PIX_EXPIRACAO_PADRAO

    @staticmethod
    def montar_payload(valor: Decimal, nome: str) -> str:
        return (
            "00020126580014BR.GOV.BCB.PIX0136"
            f"{uuid.uuid4()}"
            "520400005303986540"
            f"{valor:.2f}"
            "5802BR5913"
            f"{nome[:13]}"
            "6008SAOPAULO62070503***6304"
        )

    def gerar_cobranca(self, valor: Decimal, devedor: DevedorPix, external_id: str,
                       configuracao: Optional[ConfiguracaoPix] = None) -> CobrancaPix:
        agora = self.relogio.agora()
        return CobrancaPix(
            transaction_id=str(uuid.uuid4()),
            external_id=external_id,
            status=STATUS_PIX_PENDENTE,
            valor=valor,
            calendario=CalendarioPix(
                expiracao=self.expiracao,
                vencimento=agora + timedelta(seconds=self.expiracao),
            ),
            devedor=devedor,
            qrcode=self.montar_payload(valor, devedor.nome),
            criada_em=agora,
            origem='SIMULADO',
        )


class PagamentoCartaoSimuladoGateway(IGatewayCartao):
    """
    Simula um pagamento com cartão.
    Nenhum dado sensível é devolvido: apenas titular, final do cartão e validade.
    """

    def processar_pagamento(self, valor: Decimal, numero: str, titular: str,
                            validade: str, cvv: str) -> ResultadoPagamento:
        if valor <= 0:
            raise PagamentoFalhouError("O valor do pagamento deve ser positivo.")

        digitos = somente_digitos(numero)
        if len(digitos) < 12:
            raise PagamentoFalhouError("Número de cartão inválido (deve ter pelo menos 12 dígitos).")

        if not (titular or '').strip() or not (validade or '').strip() or not (cvv or '').strip():
            raise PagamentoFalhouError("Preencha titular, validade e CVV do cartão.")

        if cvv == "000":
            raise PagamentoFalhouError("Pagamento recusado pela operadora (CVV inválido).")

        transaction_id = str(uuid.uuid4())
        logger.info("Pagamento com cartão final %s aprovado (transação %s).", digitos[-4:], transaction_id)

        return ResultadoPagamento(
            metodo='cartao',
            status=STATUS_PAGAMENTO_CONCLUIDO,
            transaction_id=transaction_id,
            dados_cartao={
                'titular': titular.strip(),
                'final': digitos[-4:],
                'validade': validade.strip(),
            },
        )
