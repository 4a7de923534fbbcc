"""
Módulo Central de Extensões.
Evita importações circulares centralizando as instâncias das extensões.
"""
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_wtf.csrf import CSRFProtect

# 1. Limiter (Rate Limiting)
# Limites e storage vêm da config (RATELIMIT_DEFAULT / RATELIMIT_STORAGE_URI).
limiter = Limiter(key_func=get_remote_address)

# 2. CSRF Protection
csrf = CSRFProtect()
