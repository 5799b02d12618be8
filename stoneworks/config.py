import os

class BaseConfig:
    SECRET_KEY = os.getenv('SECRET_KEY', 'change-me')
    ESTIMATES_API_URL = os.getenv('ESTIMATES_API_URL', 'http://localhost:8080')
    ESTIMATES_API_TIMEOUT = int(os.getenv('ESTIMATES_API_TIMEOUT', '10'))
    SESSION_COOKIE_SAMESITE = 'Lax'
    SESSION_COOKIE_SECURE = False

class DevConfig(BaseConfig):
    DEBUG = True
    ENV = 'development'

class ProdConfig(BaseConfig):
    DEBUG = False
    ENV = 'production'
    SESSION_COOKIE_SECURE = True
