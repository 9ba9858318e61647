class BaseErroCore(Exception):
    """Classe base para todas as exceções da Camada Core."""
    def __init__(self, message="Ocorreu um erro na operação."):
        self.message = message
        super().__init__(self.message)


class DadosInvalidosError(BaseErroCore):
    """Erro levantado quando dados inválidos são fornecidos."""
    def __init__(self, message="Os dados fornecidos são inválidos."):
        super().__init__(message)


class DadosObrigatoriosError(DadosInvalidosError):
    """Erro levantado quando um campo obrigatório do checkout está vazio."""
    def __init__(self, message="Preencha nome, e-mail e CPF para continuar."):
        super().__init__(message)

# ===============================================
# ERROS DE PERSISTÊNCIA E ENTIDADE
# ===============================================

class ItemNaoEncontradoError(BaseErroCore):
    """Erro levantado quando um item (genérico) não é encontrado."""
    def __init__(self, message="O item solicitado não foi encontrado."):
        super().__init__(message)


class ProdutoNaoEncontradoError(ItemNaoEncontradoError):
    """Erro levantado quando um produto específico não é encontrado."""
    def __init__(self, message="O produto solicitado não foi encontrado."):
        super().__init__(message)


class PedidoNaoEncontradoError(ItemNaoEncontradoError):
    """Erro específico para Pedidos não encontrados."""
    def __init__(self, message="O pedido solicitado não foi encontrado."):
        super().__init__(message)


class ConfirmacaoNecessariaError(BaseErroCore):
    """Erro levantado quando uma exclusão é pedida sem confirmação."""
    def __init__(self, message="Tem certeza que deseja excluir este produto? Confirme a exclusão."):
        super().__init__(message)

# ===============================================
# ERROS DE FLUXO DE COMPRA E PAGAMENTO
# ===============================================

class CarrinhoVazioError(BaseErroCore):
    """Erro levantado ao tentar fazer checkout com carrinho vazio."""
    def __init__(self, message="Carrinho vazio. Adicione produtos ao carrinho para continuar."):
        super().__init__(message)


class EtapaInvalidaError(BaseErroCore):
    """Erro levantado quando uma ação não pertence à etapa atual do checkout."""
    def __init__(self, message="Esta ação não está disponível na etapa atual do checkout."):
        super().__init__(message)


class PagamentoFalhouError(BaseErroCore):
    """Erro levantado quando o pagamento é rejeitado ou o provedor falha."""
    def __init__(self, message="A transação de pagamento foi rejeitada ou falhou."):
        super().__init__(message)
