"""
Configurações para o projeto PC Shop.
"""

import os
from decouple import config, Csv
from pathlib import Path
from django.contrib.messages import constants as messages

# Build paths inside the project like this: BASE_DIR / 'subdir'.
BASE_DIR = Path(__file__).resolve().parent.parent


# ====================================================================
# CONFIGURAÇÕES BÁSICAS
# ====================================================================

# A SECRET_KEY deve ser lida de uma variável de ambiente por segurança.
SECRET_KEY = config('SECRET_KEY', default='django-insecure-default-key-for-development')

# SECURITY WARNING: don't run with debug turned on in production!
DEBUG = config('DEBUG', default=False, cast=bool)

ALLOWED_HOSTS = config('ALLOWED_HOSTS', default='localhost,127.0.0.1,testserver', cast=Csv())


# ====================================================================
# APLICAÇÕES INSTALADAS
# ====================================================================

INSTALLED_APPS = [
    'django.contrib.messages',
    'django.contrib.staticfiles',

    # Aplicações de Terceiros
    'rest_framework',
    'drf_spectacular',

    # Nossas Aplicações
    'pcshop.core.apps.CoreConfig', # Entidades e Lógica Pura
    'pcshop.infrastructure.apps.InfrastructureConfig', # Armazenamento, Gateways e Comandos
    'pcshop.presentation.apps.PresentationConfig', # Views, Forms, Templates
]


# ====================================================================
# MIDDLEWARE E TEMPLATES
# ====================================================================

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

ROOT_URLCONF = 'pcshop.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.debug',
                'django.template.context_processors.request',
                'django.contrib.messages.context_processors.messages',

                # Context Processor para o Carrinho
                'pcshop.presentation.context_processors.carrinho_context',
            ],
        },
    },
]

WSGI_APPLICATION = 'pcshop.wsgi.application'


# ====================================================================
# ARMAZENAMENTO (sem banco relacional)
# ====================================================================

# Todo o estado da loja é chave-valor: não há models nem migrações.
DATABASES = {}

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
        'LOCATION': 'pcshop-default',
    },
    # Produtos, pedidos e configuração PIX (valores JSON, sem expiração)
    'armazenamento': {
        'BACKEND': config('ARMAZENAMENTO_BACKEND', default='django.core.cache.backends.filebased.FileBasedCache'),
        'LOCATION': config('ARMAZENAMENTO_LOCATION', default=str(BASE_DIR / '.armazenamento')),
        'TIMEOUT': None,
    },
}

ARMAZENAMENTO_ALIAS = config('ARMAZENAMENTO_ALIAS', default='armazenamento')

# Carrinho e checkout ficam no navegador de cada cliente (cookie assinado),
# sem depender de cache do servidor nem de um único processo
SESSION_ENGINE = 'django.contrib.sessions.backends.signed_cookies'

# Mensagens via cookie: não dependem da sessão já estar salva
MESSAGE_STORAGE = 'django.contrib.messages.storage.fallback.FallbackStorage'


# ====================================================================
# INTERNACIONALIZAÇÃO
# ====================================================================

LANGUAGE_CODE = 'pt-br'

TIME_ZONE = 'America/Sao_Paulo'

USE_I18N = True

USE_TZ = True


# ====================================================================
# ARQUIVOS ESTÁTICOS (CSS, JavaScript, Imagens)
# ====================================================================

STATIC_URL = '/static/'
STATIC_ROOT = os.path.join(BASE_DIR, 'staticfiles')


# ====================================================================
# CONFIGURAÇÕES DO DJANGO REST FRAMEWORK (DRF) E DOCS (SPECTACULAR)
# ====================================================================

SPECTACULAR_SETTINGS = {
    'TITLE': 'API do PC Shop',
    'DESCRIPTION': 'Catálogo, carrinho, checkout e pagamentos (PIX e cartão simulados) da PC Shop.',
    'VERSION': '1.0.0',
    'SERVE_INCLUDE_SCHEMA': False,
}

REST_FRAMEWORK = {
    # A loja não tem contas de usuário: o estado do cliente vive na sessão.
    'DEFAULT_AUTHENTICATION_CLASSES': [],
    'DEFAULT_PERMISSION_CLASSES': [
        'rest_framework.permissions.AllowAny',
    ],
    'UNAUTHENTICATED_USER': None,
    'DEFAULT_RENDERER_CLASSES': [
        'rest_framework.renderers.JSONRenderer',
    ],
    'DEFAULT_SCHEMA_CLASS': 'drf_spectacular.openapi.AutoSchema',
}


# ====================================================================
# CONFIGURAÇÕES DE SERVIÇOS EXTERNOS (PIX) E LOGGING
# ====================================================================

# Provedor PIX (pixupbr); sem credenciais ativas, a cobrança é simulada
PIX_API_URL = config('PIX_API_URL', default='https://api.pixupbr.com/v2/pix/qrcode')
PIX_API_TIMEOUT = config('PIX_API_TIMEOUT', default=15, cast=int)
PIX_EXPIRACAO_PADRAO = config('PIX_EXPIRACAO_PADRAO', default=300, cast=int)  # segundos
PIX_TEMPO_CONFIRMACAO = config('PIX_TEMPO_CONFIRMACAO', default=30, cast=int)  # segundos


# Configurações de Logging
LOG_FILE = config('LOG_FILE', default='')

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'handlers': {
        'console': {
            'level': config('LOG_LEVEL', default='INFO'),
            'class': 'logging.StreamHandler',
            'formatter': 'verbose',
        },
    },
    'formatters': {
        'verbose': {
            'format': '{levelname} {asctime} {module} {process:d} {thread:d} {message}',
            'style': '{',
        },
    },
    'loggers': {
        'django': {
            'handlers': ['console'],
            'level': 'WARNING',
            'propagate': True,
        },
        'pcshop': {
            'handlers': ['console'],
            'level': 'INFO',
            'propagate': False,
        },
    },
}

if LOG_FILE:
    LOGGING['handlers']['file'] = {
        'level': config('LOG_LEVEL', default='WARNING'),
        'class': 'logging.handlers.RotatingFileHandler',
        'filename': LOG_FILE,
        'maxBytes': 1024 * 1024 * 5,  # 5 MB
        'backupCount': 5,
        'formatter': 'verbose',
    }
    for definicao in LOGGING['loggers'].values():
        definicao['handlers'].append('file')

# --- Configurações de Mensagens (Estilo Tailwind) ---
MESSAGE_TAGS = {
    messages.DEBUG: 'bg-gray-800 text-white',
    messages.INFO: 'bg-blue-500 text-white',
    messages.SUCCESS: 'bg-green-500 text-white',
    messages.WARNING: 'bg-yellow-500 text-white',
    messages.ERROR: 'bg-red-500 text-white',
}
