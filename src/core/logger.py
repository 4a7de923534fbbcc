"""
Módulo de Logging Centralizado.

Todos os módulos da aplicação obtêm seus loggers por aqui, garantindo
o mesmo formato de saída (stdout, amigável a containers).
"""

import logging
import os
import sys

FORMATO_LOG = '[%(asctime)s] %(levelname)s in %(module)s: %(message)s'


def get_logger(name: str) -> logging.Logger:
    """
    Configura e retorna uma instância de logger com formatação padronizada.

    O nível vem da variável de ambiente LOG_LEVEL (padrão INFO), para que
    scripts fora do contexto Flask usem a mesma configuração.

    Args:
        name (str): O nome do módulo que está chamando o log (geralmente __name__).

    Returns:
        logging.Logger: Instância configurada do logger.
    """
    logger = logging.getLogger(name)

    # Evita adicionar múltiplos handlers se o logger já estiver configurado
    if not logger.handlers:
        nivel = os.environ.get('LOG_LEVEL', 'INFO').upper()
        logger.setLevel(getattr(logging, nivel, logging.INFO))

        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(FORMATO_LOG))
        logger.addHandler(handler)

    return logger


def ajustar_nivel(nivel: str) -> None:
    """Aplica o nível configurado na app a todos os loggers já criados em 'src'."""
    valor = getattr(logging, nivel.upper(), logging.INFO)
    for nome, logger in logging.Logger.manager.loggerDict.items():
        if nome.startswith('src') and isinstance(logger, logging.Logger):
            logger.setLevel(valor)
