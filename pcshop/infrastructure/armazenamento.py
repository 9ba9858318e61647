"""
Armazenamento chave-valor da loja.

Os valores são gravados como texto JSON, tal como no armazenamento local do
navegador: produtos, pedidos e configuração PIX ficam no cache compartilhado
(alias 'armazenamento'); carrinho e checkout ficam na sessão de cada cliente.
"""
import json
import logging
from typing import Any

from django.conf import settings
from django.core.cache import caches

logger = logging.getLogger(__name__)


class ArmazenamentoCache:
    """Armazenamento compartilhado sobre um backend de cache do Django (sem expiração)."""

    def __init__(self, alias: str = None):
        self.alias = alias or getattr(settings, 'ARMAZENAMENTO_ALIAS', 'armazenamento')

    @property
    def cache(self):
        # Resolvido a cada acesso: os testes trocam CACHES com override_settings
        return caches[self.alias]

    def ler(self, chave: str, padrao: Any = None) -> Any:
        bruto = self.cache.get(chave)
        if bruto is None:
            return padrao
        try:
            return json.loads(bruto)
        except (TypeError, ValueError):
            logger.warning("Valor ilegível na chave '%s' do armazenamento; ignorado.", chave)
            return padrao

    def gravar(self, chave: str, valor: Any) -> None:
        self.cache.set(chave, json.dumps(valor), timeout=None)

    def remover(self, chave: str) -> None:
        self.cache.delete(chave)


class ArmazenamentoSessao:
    """Estado por cliente guardado na sessão do Django."""

    def __init__(self, session):
        self.session = session

    def ler(self, chave: str, padrao: Any = None) -> Any:
        return self.session.get(chave, padrao)

    def gravar(self, chave: str, valor: Any) -> None:
        self.session[chave] = valor
        self.session.modified = True

    def remover(self, chave: str) -> None:
        if chave in self.session:
            del self.session[chave]
            self.session.modified = True
