"""
Módulo Principal da Aplicação (Application Factory)
"""

from flask import Flask, jsonify
from flask_wtf.csrf import generate_csrf
from werkzeug.exceptions import HTTPException
from werkzeug.middleware.proxy_fix import ProxyFix
from config import Config, validar_data_referencia

from .core.carregador import carregar_dados_iniciais
from .core.extensions import csrf, limiter
from .core.logger import ajustar_nivel, get_logger

logger = get_logger(__name__)

MENSAGENS_HTTP = {
    400: "Requisição inválida.",
    404: "Página não encontrada.",
    405: "Método não permitido.",
    409: "Conflito com o estado atual dos dados.",
    429: "Muitas requisições. Tente novamente em instantes.",
}


def create_app(config_class=Config):
    """
    Cria e configura uma instância da aplicação Flask.
    """

    app = Flask(__name__, instance_relative_config=True)

    # Atrás de proxy, as URLs devem respeitar o esquema/host originais
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_prefix=1)

    # 1. Carrega a configuração
    app.config.from_object(config_class)
    validar_data_referencia(app.config.get('DATA_REFERENCIA'))
    app.json.sort_keys = app.config.get('JSON_SORT_KEYS', False)
    ajustar_nivel(app.config.get('LOG_LEVEL', 'INFO'))

    # 2. Extensões (CSRF e Rate Limiting)
    csrf.init_app(app)
    limiter.init_app(app)

    # 3. Repositório em memória, populado com os dados iniciais
    app.extensions['repositorio'] = carregar_dados_iniciais(app.config.get('DADOS_INICIAIS'))

    # 4. Configura os Blueprints (Módulos)
    # Os url_prefix já estão definidos nos __init__.py de cada módulo
    from .painel import painel_bp
    app.register_blueprint(painel_bp)

    from .cadastro import cadastro_bp
    app.register_blueprint(cadastro_bp)

    from .gestao import gestao_bp
    app.register_blueprint(gestao_bp)

    # 5. Erros HTTP sempre em JSON
    @app.errorhandler(HTTPException)
    def erro_http(e):
        descricao = e.description
        if descricao == type(e).description:
            # Mensagem padrão do Werkzeug (em inglês)
            descricao = MENSAGENS_HTTP.get(e.code, e.name)
        return jsonify({'erro': descricao}), e.code

    # 6. Token CSRF para clientes que fazem POST/PATCH/DELETE
    @app.route("/csrf-token")
    def csrf_token():
        return jsonify({'csrf_token': generate_csrf()})

    # 7. Rota de Health Check
    @app.route("/health")
    def health_check():
        return "Servidor de Gestão Acadêmica no ar!", 200

    logger.info("Aplicação inicializada.")
    return app
