from django.core.management.base import BaseCommand

from pcshop.infrastructure.armazenamento import ArmazenamentoCache
from pcshop.infrastructure.dados_iniciais import CATALOGO_COMPLETO, com_id
from pcshop.infrastructure.mappers import ProdutoMapper
from pcshop.infrastructure.repositories import ProdutoRepositoryArmazenamento


class Command(BaseCommand):
    help = 'Carrega o catálogo inicial de peças no armazenamento da loja'

    def add_arguments(self, parser):
        parser.add_argument(
            '--limpar',
            action='store_true',
            help='Apaga o catálogo atual antes de carregar os produtos.',
        )

    def handle(self, *args, **options):
        self.stdout.write('Carregando catálogo inicial...')

        produto_repo = ProdutoRepositoryArmazenamento(ArmazenamentoCache())

        if options['limpar']:
            produto_repo.salvar_lista([])
            self.stdout.write(self.style.WARNING('Catálogo atual removido.'))

        produtos = produto_repo.listar()
        slugs = {p.slug for p in produtos}

        for registro in CATALOGO_COMPLETO:
            if registro['pathName'] in slugs:
                continue
            produto = ProdutoMapper.to_entity(com_id(registro))
            produtos.append(produto)
            slugs.add(produto.slug)
            self.stdout.write(self.style.SUCCESS(f'Criado produto "{produto.nome}"'))

        produto_repo.salvar_lista(produtos)
        self.stdout.write(self.style.SUCCESS('Catálogo inicial carregado com sucesso!'))
