import unittest
from datetime import date

from src.core.modelos import (
    Aluno,
    AulaEmenta,
    DadosAcademicos,
    DiarioAula,
    Ementa,
    Endereco,
    Instrutor,
    Interessado,
    MetricaQualitativa,
    RegistroPresenca,
    Turma,
)
from src.painel.metricas import (
    DesempenhoInstrutor,
    calcular_idade,
    calcular_taxa,
    contar_por_status,
    distribuicao_agrupada,
    historico_presenca_aluno,
    metricas_instrutores,
    painel_instrutor,
    progresso_ementa,
    ranking_instrutores,
    resumo_geral,
    taxa_presenca,
)
from src.painel.qualitativas import metricas_qualitativas


def diario(id, turma_id='t1', instrutor_id='i1', data='2024-02-05', presencas=(), aula_ementa_id=None):
    return DiarioAula(
        id=id, turma_id=turma_id, instrutor_id=instrutor_id, data=data,
        aula_ementa_id=aula_ementa_id,
        presencas=tuple(RegistroPresenca(aluno_id=a, status=s) for a, s in presencas),
    )


def desempenho(id, taxa, diarios):
    return DesempenhoInstrutor(
        instrutor_id=id, nome=id, especialidades=(), turmas_ativas=0, turmas_finalizadas=0,
        total_turmas=0, total_alunos=0, diarios_lancados=diarios, diarios_mes_atual=0,
        taxa_presenca_media=taxa,
    )


class TestTaxas(unittest.TestCase):

    def test_calcular_taxa(self):
        self.assertEqual(calcular_taxa(1, 3), '33.3')
        self.assertEqual(calcular_taxa(2, 3), '66.7')
        self.assertEqual(calcular_taxa(3, 3), '100.0')
        self.assertEqual(calcular_taxa(0, 5), '0.0')

    def test_calcular_taxa_total_zero(self):
        self.assertEqual(calcular_taxa(0, 0), '0')

    def test_calcular_taxa_meio_arredonda_para_cima(self):
        # 1/8 = 12.5% e 1/16 = 6.25%
        self.assertEqual(calcular_taxa(1, 16), '6.3')
        self.assertEqual(calcular_taxa(1, 8), '12.5')

    def test_contar_por_status_inclui_conhecidos_com_zero(self):
        alunos = [Aluno(id='a1', nome='A', status='ativo'), Aluno(id='a2', nome='B', status='ativo')]
        contagem = contar_por_status(alunos, ('ativo', 'concluido'))
        self.assertEqual(contagem, {'ativo': 2, 'concluido': 0})


class TestDistribuicao(unittest.TestCase):

    def test_top_10_bairros_em_ordem_decrescente(self):
        alunos = []
        for indice in range(15):
            for repeticao in range(indice + 1):
                alunos.append(Aluno(
                    id=f'a{indice}-{repeticao}',
                    nome='Aluno',
                    endereco=Endereco(bairro=f'Bairro {indice}'),
                ))

        resultado = distribuicao_agrupada(alunos, 'endereco.bairro', limite=10)

        self.assertEqual(len(resultado), 10)
        quantidades = [item['quantidade'] for item in resultado]
        self.assertEqual(quantidades, sorted(quantidades, reverse=True))
        self.assertEqual(resultado[0], {'rotulo': 'Bairro 14', 'quantidade': 15,
                                        'percentual': calcular_taxa(15, len(alunos))})

    def test_campo_ausente_vira_nao_informado(self):
        alunos = [
            Aluno(id='a1', nome='A', endereco=Endereco(bairro='Centro')),
            Aluno(id='a2', nome='B', endereco=None),
            Aluno(id='a3', nome='C', endereco=Endereco(bairro='  ')),
        ]
        resultado = distribuicao_agrupada(alunos, 'endereco.bairro')

        self.assertEqual(resultado[0]['rotulo'], 'Não informado')
        self.assertEqual(resultado[0]['quantidade'], 2)
        self.assertEqual(resultado[0]['percentual'], '66.7')

    def test_empates_mantem_ordem_de_aparicao(self):
        interessados = [
            Interessado(id='p1', tipo='aluno', nome='A', genero='feminino'),
            Interessado(id='p2', tipo='aluno', nome='B', genero='masculino'),
        ]
        resultado = distribuicao_agrupada(interessados, 'genero')
        self.assertEqual([r['rotulo'] for r in resultado], ['feminino', 'masculino'])

    def test_colecao_vazia(self):
        self.assertEqual(distribuicao_agrupada([], 'genero'), [])


class TestInstrutores(unittest.TestCase):

    def setUp(self):
        self.instrutores = [
            Instrutor(id='i1', nome='Ana Souza'),
            Instrutor(id='i2', nome='Carlos Lima'),
            Instrutor(id='i3', nome='Beatriz Rocha', status='inativo'),
        ]
        self.turmas = [
            Turma(id='t1', codigo='WEB-01', ementa_id='e1', status='em_andamento',
                  data_inicio='2024-01-01', instrutor_id='i1', vagas_total=20, vagas_ocupadas=3),
            Turma(id='t2', codigo='WEB-02', ementa_id='e1', status='finalizada',
                  data_inicio='2023-01-01', instrutor_id='i1', vagas_total=20, vagas_ocupadas=5),
        ]
        self.diarios = [
            diario('d1', data='2024-02-05', presencas=[('a1', 'presente'), ('a2', 'presente'), ('a3', 'ausente')]),
            diario('d2', data='2024-01-10', presencas=[('a1', 'presente')]),
            diario('d3', turma_id='t2', data='2023-03-01', presencas=[('a4', 'justificado')]),
        ]

    def test_apenas_instrutores_ativos(self):
        resultado = metricas_instrutores(self.instrutores, self.turmas, self.diarios, date(2024, 2, 20))
        self.assertEqual([d.instrutor_id for d in resultado], ['i1', 'i2'])

    def test_metricas_do_instrutor(self):
        ana = metricas_instrutores(self.instrutores, self.turmas, self.diarios, date(2024, 2, 20))[0]

        self.assertEqual(ana.turmas_ativas, 1)
        self.assertEqual(ana.turmas_finalizadas, 1)
        self.assertEqual(ana.total_turmas, 2)
        self.assertEqual(ana.total_alunos, 8)
        self.assertEqual(ana.diarios_lancados, 3)
        self.assertEqual(ana.diarios_mes_atual, 1)
        # 3 presentes em 5 registros
        self.assertEqual(ana.taxa_presenca_media, 60)
        self.assertEqual(ana.pontuacao, 61.5)

    def test_instrutor_sem_diarios_tem_taxa_zero(self):
        carlos = metricas_instrutores(self.instrutores, self.turmas, self.diarios, date(2024, 2, 20))[1]

        self.assertEqual(carlos.diarios_lancados, 0)
        self.assertEqual(carlos.taxa_presenca_media, 0)
        self.assertEqual(taxa_presenca([]), 0)

    def test_restringir_aos_diarios_das_turmas_filtradas(self):
        ana = metricas_instrutores(self.instrutores, self.turmas[:1], self.diarios, date(2024, 2, 20),
                                   restringir_a_turmas=True)[0]
        self.assertEqual(ana.diarios_lancados, 2)

    def test_ranking_estavel_em_empates(self):
        entrada = [desempenho('x', 80, 0), desempenho('y', 90, 2), desempenho('z', 80, 0)]
        ranking = ranking_instrutores(entrada)
        self.assertEqual([d.instrutor_id for d in ranking], ['y', 'x', 'z'])

        invertida = [entrada[2], entrada[1], entrada[0]]
        self.assertEqual([d.instrutor_id for d in ranking_instrutores(invertida)], ['y', 'z', 'x'])

    def test_para_dict_inclui_pontuacao(self):
        dados = desempenho('x', 50, 4).para_dict()
        self.assertEqual(dados['pontuacao'], 52.0)
        self.assertEqual(dados['especialidades'], [])


class TestIdade(unittest.TestCase):

    def test_vespera_do_aniversario(self):
        self.assertEqual(calcular_idade('2000-06-15', date(2024, 6, 14)), 23)

    def test_dia_do_aniversario_e_depois(self):
        self.assertEqual(calcular_idade('2000-06-15', date(2024, 6, 15)), 24)
        self.assertEqual(calcular_idade('2000-06-15', '2024-12-31'), 24)

    def test_aceita_data_com_horario(self):
        self.assertEqual(calcular_idade('2000-06-15T10:00:00', date(2024, 6, 15)), 24)


class TestResumos(unittest.TestCase):

    def test_resumo_geral(self):
        dados = DadosAcademicos(
            turmas=(Turma(id='t1', codigo='T1', ementa_id='e1', status='em_andamento', data_inicio='2024-01-01'),),
            alunos=(
                Aluno(id='a1', nome='A', status='concluido'),
                Aluno(id='a2', nome='B', status='evadido'),
                Aluno(id='a3', nome='C', status='ativo'),
            ),
            interessados=(
                Interessado(id='p1', tipo='aluno', nome='P', status='matriculado'),
                Interessado(id='p2', tipo='aluno', nome='Q', status='novo'),
            ),
        )
        resumo = resumo_geral(dados)

        self.assertEqual(resumo['taxa_conclusao'], '33.3')
        self.assertEqual(resumo['taxa_evasao'], '33.3')
        self.assertEqual(resumo['taxa_conversao'], '50.0')
        self.assertEqual(resumo['interessados_novos'], 1)
        self.assertEqual(resumo['horas_ministradas'], 24)

    def test_resumo_sem_dados(self):
        resumo = resumo_geral(DadosAcademicos())
        self.assertEqual(resumo['taxa_conclusao'], '0')
        self.assertEqual(resumo['total_alunos'], 0)

    def test_historico_presenca_aluno(self):
        diarios = [
            diario('d1', data='2024-02-05', presencas=[('a1', 'presente')]),
            diario('d2', data='2024-02-07', presencas=[('a1', 'ausente'), ('a2', 'presente')]),
            diario('d3', data='2024-02-09', presencas=[('a2', 'presente')]),
        ]
        historico = historico_presenca_aluno('a1', diarios)

        self.assertEqual(historico['total_aulas'], 2)
        self.assertEqual(historico['taxa_presenca'], 50)
        self.assertEqual([r['diario_id'] for r in historico['registros']], ['d2', 'd1'])

    def test_progresso_ementa(self):
        ementa = Ementa(id='e1', curso_id='c1', aulas=tuple(
            AulaEmenta(id=f'a{n}', numero=n, titulo=f'Aula {n}') for n in range(1, 5)
        ))
        diarios = [
            diario('d1', aula_ementa_id='a1'),
            diario('d2', aula_ementa_id='a2'),
            diario('d3', aula_ementa_id='outra-ementa'),
        ]
        progresso = progresso_ementa(ementa, diarios)

        self.assertEqual(progresso['aulas_completas'], 2)
        self.assertEqual(progresso['progresso'], 50)
        self.assertEqual(progresso['aula_atual']['id'], 'a2')
        self.assertEqual([a['id'] for a in progresso['proximas_aulas']], ['a3', 'a4'])

    def test_painel_instrutor_turma_com_aula_hoje(self):
        # 2024-02-19 é segunda-feira
        dados = DadosAcademicos(
            turmas=(Turma(id='t1', codigo='T1', ementa_id='e1', status='em_andamento', data_inicio='2024-01-01',
                          instrutor_id='i1', dias_semana=('segunda', 'quarta'), vagas_total=10, vagas_ocupadas=4),),
            diarios=(diario('d1', data='2024-02-14', presencas=[('a1', 'presente'), ('a2', 'ausente')]),),
        )
        painel = painel_instrutor('i1', dados, date(2024, 2, 19))

        self.assertEqual(painel['turma_com_aula_hoje']['id'], 't1')
        self.assertEqual(painel['diarios_mes_atual'], 1)
        self.assertEqual(painel['taxa_presenca'], 50)
        self.assertEqual(painel['total_alunos'], 4)

        # Diário do dia já lançado: nada pendente
        com_diario = DadosAcademicos(turmas=dados.turmas, diarios=dados.diarios + (diario('d2', data='2024-02-19'),))
        self.assertIsNone(painel_instrutor('i1', com_diario, date(2024, 2, 19))['turma_com_aula_hoje'])


class TestQualitativas(unittest.TestCase):

    def test_medias_e_percentuais(self):
        respostas = [
            MetricaQualitativa(id='m1', aluno_id='a1', turma_id='t1', satisfacao_curso=5,
                               seguranca_ferramentas_digitais=4, habilidade_programacao=3,
                               candidatando_vagas=True, interesse_graduacao=True, tipo_oportunidade='emprego'),
            MetricaQualitativa(id='m2', aluno_id='a2', turma_id='t1', satisfacao_curso=4,
                               seguranca_ferramentas_digitais=4, habilidade_programacao=2,
                               interesse_curso_tecnico=True, tipo_oportunidade='nenhuma'),
        ]
        resultado = metricas_qualitativas(respostas)

        self.assertEqual(resultado['total_respostas'], 2)
        self.assertEqual(resultado['media_satisfacao'], '4.5')
        self.assertEqual(resultado['media_seguranca_digital'], '80.0')
        self.assertEqual(resultado['media_habilidade_programacao'], '50.0')
        self.assertEqual(resultado['percentual_candidatando'], '50.0')
        self.assertEqual(resultado['tipos_oportunidade'], {'emprego': 1, 'nenhuma': 1})
        self.assertEqual(resultado['distribuicao_satisfacao'][4], {'nivel': 5, 'quantidade': 1, 'percentual': '50.0'})

    def test_sem_respostas(self):
        resultado = metricas_qualitativas([])

        self.assertEqual(resultado['media_satisfacao'], '0')
        self.assertEqual(resultado['percentual_graduacao'], '0')
        self.assertEqual(len(resultado['distribuicao_satisfacao']), 5)


if __name__ == '__main__':
    unittest.main()
