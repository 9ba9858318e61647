# pcshop/core/formatacao.py
"""
Funções puras de formatação usadas pela loja (slug, CPF, moeda e cronômetro).
"""
import re
from decimal import Decimal

_ESPACOS = re.compile(r'\s+')
_NAO_SLUG = re.compile(r'[^a-z0-9-]')
_NAO_DIGITO = re.compile(r'\D')
_CPF = re.compile(r'(\d{3})(\d{3})(\d{3})(\d{2})')


def gerar_slug(nome: str) -> str:
    """
    Deriva o slug a partir do nome: minúsculas, espaços viram hífen e
    qualquer caractere fora de [a-z0-9-] é descartado.
    """
    if not nome:
        return ''
    slug = _ESPACOS.sub('-', nome.lower())
    return _NAO_SLUG.sub('', slug)


def somente_digitos(valor: str) -> str:
    return _NAO_DIGITO.sub('', valor or '')


def formatar_cpf(valor: str) -> str:
    """
    Máscara cosmética do CPF (000.000.000-00).
    Com menos de 11 dígitos devolve só os dígitos; com mais de 11 devolve o valor original.
    """
    digitos = somente_digitos(valor)
    if len(digitos) <= 11:
        return _CPF.sub(r'\1.\2.\3-\4', digitos, count=1)
    return valor


def formatar_moeda(valor) -> str:
    """Retorna o valor formatado em Real Brasileiro."""
    valor = Decimal(str(valor or 0))
    return f"R$ {valor:,.2f}".replace(",", "X").replace(".", ",").replace("X", ".")


def formatar_tempo(segundos: int) -> str:
    """Formata o cronômetro como MM:SS."""
    segundos = max(0, int(segundos))
    minutos, resto = divmod(segundos, 60)
    return f"{minutos:02d}:{resto:02d}"
