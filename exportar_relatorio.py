"""
Script Utilitário: exportar_relatorio.py
Use este script para exportar o painel administrativo em um arquivo JSON,
com os mesmos filtros aceitos pela rota /painel.
"""

import json
from datetime import date
from pathlib import Path

from src import create_app
from src.core.repositorio import obter_repositorio
from src.painel.filtros import FiltrosPainel
from src.painel.services import montar_metricas, montar_painel

SECOES = ('visao_geral', 'turmas', 'alunos', 'instrutores', 'interessados', 'qualitativas')


def exportar_relatorio(app, caminho, filtros=None, secoes=SECOES, hoje=None):
    """
    Grava o relatório em `caminho` e devolve o dicionário exportado.
    Seções desconhecidas geram ValueError.
    """
    desconhecidas = set(secoes) - set(SECOES)
    if desconhecidas:
        raise ValueError(f"Seções desconhecidas: {', '.join(sorted(desconhecidas))}")

    filtros = filtros or FiltrosPainel()
    if hoje is None:
        referencia = app.config.get('DATA_REFERENCIA')
        hoje = date.fromisoformat(referencia) if referencia else date.today()

    with app.app_context():
        dados = obter_repositorio().snapshot()
        limite = app.config.get('LIMITE_BAIRROS', 10)

        painel = montar_painel(dados, filtros, hoje, limite)
        completo = dict(painel)
        completo['qualitativas'] = montar_metricas(dados, limite)['qualitativas']

    relatorio = {
        'gerado_em': hoje.isoformat(),
        'filtros': filtros.para_dict(),
    }
    for secao in secoes:
        relatorio[secao] = completo[secao]

    destino = Path(caminho)
    destino.parent.mkdir(parents=True, exist_ok=True)
    with destino.open('w', encoding='utf-8') as f:
        json.dump(relatorio, f, ensure_ascii=False, indent=2)

    return relatorio


if __name__ == "__main__":
    app = create_app()

    print("--- Exportar relatório do painel ---")
    curso_id = input("Curso (id, vazio = todos): ").strip() or None
    data_inicial = input("Data inicial (AAAA-MM-DD, vazio = sem limite): ").strip() or None
    data_final = input("Data final (AAAA-MM-DD, vazio = sem limite): ").strip() or None
    secoes = input(f"Seções ({', '.join(SECOES)}; vazio = todas): ").strip()
    caminho = input("Arquivo de saída [relatorio.json]: ").strip() or 'relatorio.json'

    try:
        relatorio = exportar_relatorio(
            app,
            caminho,
            FiltrosPainel(curso_id=curso_id, data_inicial=data_inicial, data_final=data_final),
            secoes=tuple(s.strip() for s in secoes.split(',')) if secoes else SECOES,
        )
    except ValueError as e:
        print(f"❌ ERRO: {e}")
    else:
        print(f"✅ SUCESSO! Relatório salvo em '{caminho}' ({len(relatorio) - 2} seções).")
