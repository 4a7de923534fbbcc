import json

import pytest

from exportar_relatorio import SECOES, exportar_relatorio
from src.painel.filtros import FiltrosPainel


def test_exporta_todas_as_secoes(app, tmp_path):
    destino = tmp_path / 'saida' / 'relatorio.json'
    relatorio = exportar_relatorio(app, destino)

    assert destino.exists()
    gravado = json.loads(destino.read_text(encoding='utf-8'))
    assert gravado == relatorio
    assert gravado['gerado_em'] == '2024-02-20'
    for secao in SECOES:
        assert secao in gravado


def test_exporta_secoes_escolhidas_com_filtro(app, tmp_path):
    relatorio = exportar_relatorio(app, tmp_path / 'web.json', FiltrosPainel(curso_id='c1'),
                                   secoes=('turmas', 'interessados'))

    assert set(relatorio) == {'gerado_em', 'filtros', 'turmas', 'interessados'}
    assert relatorio['filtros']['curso_id'] == 'c1'
    assert relatorio['turmas']['total'] == 2


def test_secao_desconhecida(app, tmp_path):
    with pytest.raises(ValueError):
        exportar_relatorio(app, tmp_path / 'x.json', secoes=('financeiro',))
    assert not (tmp_path / 'x.json').exists()
