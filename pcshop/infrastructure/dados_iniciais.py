"""
Catálogo inicial da loja, no formato gravado na chave 'products'.
Os IDs são gerados no momento da gravação.
"""
import copy

from pcshop.core.entities import novo_id

# Produto de exemplo gravado na primeira leitura do catálogo
PRODUTO_EXEMPLO = {
    'name': 'Processador Intel Core i5-12400F',
    'categoria': 'processador',
    'fabricante': 'Intel',
    'modelo': 'i5-12400F',
    'pPrazo': 899.99,
    'img': '/images/cpu/i5-1.jpg',
    'img2': '/images/cpu/i5-2.jpg',
    'pathName': 'intel-core-i5-12400f',
    'garantia': '3 anos',
    'promo': False,
    'destaque': True,
    'specs': [
        {'Especificações Gerais': ['6 núcleos', '12 threads', '2.5 GHz base']}
    ],
    'tags': ['intel', 'processador', 'gaming'],
}

# Demais categorias, carregadas pelo comando load_initial_data
CATALOGO_COMPLETO = [
    PRODUTO_EXEMPLO,
    {
        'name': 'Placa Mãe ASUS Prime B660M-A',
        'categoria': 'placa-mae',
        'fabricante': 'ASUS',
        'modelo': 'Prime B660M-A D4',
        'pPrazo': 1099.90,
        'img': '/images/placa-mae/b660m-1.jpg',
        'img2': '/images/placa-mae/b660m-2.jpg',
        'pathName': 'placa-mae-asus-prime-b660m-a',
        'garantia': '1 ano',
        'promo': True,
        'destaque': False,
        'specs': [
            {'Especificações Gerais': ['Socket LGA1700', 'Micro-ATX', '4x DDR4']}
        ],
        'tags': ['asus', 'placa-mae', 'lga1700'],
    },
    {
        'name': 'Placa de Vídeo RTX 4060 Gigabyte Windforce OC',
        'categoria': 'placa-de-video',
        'fabricante': 'Gigabyte',
        'modelo': 'RTX 4060 Windforce OC 8GB',
        'pPrazo': 2199.99,
        'img': '/images/gpu/rtx4060-1.jpg',
        'img2': '/images/gpu/rtx4060-2.jpg',
        'pathName': 'placa-de-video-rtx-4060-gigabyte-windforce-oc',
        'garantia': '3 anos',
        'promo': False,
        'destaque': True,
        'specs': [
            {'Especificações Gerais': ['8 GB GDDR6', '128 bits', 'PCIe 4.0']}
        ],
        'tags': ['nvidia', 'placa-de-video', 'gaming'],
    },
    {
        'name': 'Memória Kingston Fury Beast 16GB DDR4',
        'categoria': 'memoria-ram',
        'fabricante': 'Kingston',
        'modelo': 'KF432C16BB/16',
        'pPrazo': 289.90,
        'img': '/images/ram/fury-1.jpg',
        'img2': '/images/ram/fury-2.jpg',
        'pathName': 'memoria-kingston-fury-beast-16gb-ddr4',
        'garantia': 'Vitalícia',
        'promo': True,
        'destaque': False,
        'specs': [
            {'Especificações Gerais': ['16 GB', '3200 MHz', 'CL16']}
        ],
        'tags': ['kingston', 'memoria-ram', 'ddr4'],
    },
    {
        'name': 'SSD Kingston NV2 1TB NVMe',
        'categoria': 'ssd',
        'fabricante': 'Kingston',
        'modelo': 'SNV2S/1000G',
        'pPrazo': 399.90,
        'img': '/images/ssd/nv2-1.jpg',
        'img2': '/images/ssd/nv2-2.jpg',
        'pathName': 'ssd-kingston-nv2-1tb-nvme',
        'garantia': '3 anos',
        'promo': False,
        'destaque': False,
        'specs': [
            {'Especificações Gerais': ['1 TB', 'M.2 2280', 'Leitura 3500 MB/s']}
        ],
        'tags': ['kingston', 'ssd', 'nvme'],
    },
    {
        'name': 'Fonte Corsair CV650 650W 80 Plus Bronze',
        'categoria': 'fonte',
        'fabricante': 'Corsair',
        'modelo': 'CV650',
        'pPrazo': 379.90,
        'img': '/images/fonte/cv650-1.jpg',
        'img2': '/images/fonte/cv650-2.jpg',
        'pathName': 'fonte-corsair-cv650-650w-80-plus-bronze',
        'garantia': '2 anos',
        'promo': False,
        'destaque': False,
        'specs': [
            {'Especificações Gerais': ['650 W', '80 Plus Bronze', 'PFC ativo']}
        ],
        'tags': ['corsair', 'fonte'],
    },
    {
        'name': 'Gabinete Gamer Rise Mode Galaxy Glass',
        'categoria': 'gabinete',
        'fabricante': 'Rise Mode',
        'modelo': 'Galaxy Glass',
        'pPrazo': 259.90,
        'img': '/images/gabinete/galaxy-1.jpg',
        'img2': '/images/gabinete/galaxy-2.jpg',
        'pathName': 'gabinete-gamer-rise-mode-galaxy-glass',
        'garantia': '1 ano',
        'promo': True,
        'destaque': False,
        'specs': [
            {'Especificações Gerais': ['Mid Tower', 'Lateral em vidro', 'ATX/Micro-ATX']}
        ],
        'tags': ['rise-mode', 'gabinete'],
    },
]


def com_id(registro: dict) -> dict:
    """Cópia do registro com um ID novo."""
    novo = copy.deepcopy(registro)
    novo['id'] = novo_id()
    return novo
