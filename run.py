"""
Ponto de Entrada da Aplicação (Runner)

Sobe o servidor de desenvolvimento com os painéis, os cadastros em
etapas e a API de gestão. Host e porta vêm de HOST/PORTA no .env.

$ python run.py
"""

from src import create_app

app = create_app()

if __name__ == "__main__":
    # Repositório em memória: reiniciar o servidor recarrega os dados iniciais
    app.run(host=app.config['HOST'], port=app.config['PORTA'], debug=app.config['DEBUG'])
