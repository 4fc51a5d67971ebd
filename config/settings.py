"""
Django settings for procurement_analysis project.
"""

import os
from pathlib import Path

# Build paths inside the project
BASE_DIR = Path(__file__).resolve().parent.parent

# SECURITY WARNING: don't run with debug turned on in production!
DEBUG = os.environ.get('DJANGO_DEBUG', 'True').lower() == 'true'

# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = os.environ.get('DJANGO_SECRET_KEY')
if not SECRET_KEY:
    if DEBUG:
        SECRET_KEY = 'django-insecure-dev-key-for-development-only-change-in-production'
    else:
        raise ValueError("生产环境必须通过DJANGO_SECRET_KEY环境变量设置SECRET_KEY")

# 允许访问的主机（生产请通过环境变量显式配置）
default_allowed_hosts = ['127.0.0.1', 'localhost', 'testserver']
env_allowed_hosts = [
    host.strip() for host in os.environ.get('DJANGO_ALLOWED_HOSTS', '').split(',')
    if host.strip()
]
ALLOWED_HOSTS = env_allowed_hosts if env_allowed_hosts else default_allowed_hosts

# ============================================================================
# 安全头部配置
# ============================================================================
SECURE_CONTENT_TYPE_NOSNIFF = True
SECURE_CROSS_ORIGIN_OPENER_POLICY = 'same-origin'
X_FRAME_OPTIONS = 'DENY'
SECURE_REFERRER_POLICY = 'same-origin'

# Application definition
INSTALLED_APPS = [
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.staticfiles',

    # API文档
    'rest_framework',
    'drf_spectacular',

    # 业务应用
    'procurement_analysis.apps.ProcurementAnalysisConfig',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

ROOT_URLCONF = 'config.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.request',
            ],
        },
    },
]

WSGI_APPLICATION = 'config.wsgi.application'

REST_FRAMEWORK = {
    'DEFAULT_SCHEMA_CLASS': 'drf_spectacular.openapi.AutoSchema',
}

SPECTACULAR_SETTINGS = {
    'TITLE': '采购数据分析 API',
    'DESCRIPTION': '采购计划表统计分析报表接口文档',
    'VERSION': '1.0.0',
    'SERVE_INCLUDE_SCHEMA': False,
}

# ============================================================================
# 数据库配置（分析服务不持久化数据，仅供Django内置应用使用）
# ============================================================================
DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': BASE_DIR / 'db.sqlite3',
        'OPTIONS': {
            'timeout': 20,
        },
    }
}

LANGUAGE_CODE = 'zh-hans'
TIME_ZONE = 'Asia/Shanghai'
USE_I18N = True
USE_TZ = True

STATIC_URL = '/static/'
STATIC_ROOT = BASE_DIR / 'staticfiles'

DATA_UPLOAD_MAX_MEMORY_SIZE = 100 * 1024 * 1024  # 100MB - 总请求大小限制

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

# ============================================================================
# 日志配置
# ============================================================================
ANALYSIS_LOG_LEVEL = os.environ.get('ANALYSIS_LOG_LEVEL', 'INFO').upper()

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '[{asctime}] {levelname} {name}: {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'verbose',
        },
    },
    'loggers': {
        'procurement_analysis': {
            'handlers': ['console'],
            'level': ANALYSIS_LOG_LEVEL,
            'propagate': False,
        },
    },
}

# 采购数据分析配置
PROCUREMENT_ANALYSIS_CONFIG = {
    'MAX_FILE_SIZE': 10 * 1024 * 1024,  # 10MB
    'ALLOWED_EXTENSIONS': ['.csv', '.xlsx'],
    'CONFIG_DIR': BASE_DIR / 'procurement_analysis' / 'config',
    'DEFAULT_ENCODING': os.environ.get('ANALYSIS_DEFAULT_ENCODING') or None,  # None 表示自动检测
    'MAX_API_RECORDS': 50000,  # 单次API请求允许的最大记录数
}
