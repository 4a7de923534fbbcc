import json
import os
import tempfile
import unittest
from dataclasses import FrozenInstanceError

from config import validar_data_referencia
from src.core.carregador import carregar_dados_iniciais, popular_repositorio
from src.core.modelos import Aluno, Endereco
from src.core.repositorio import ErroDeIntegridade, RegistroNaoEncontrado, RepositorioAcademico

ARQUIVO_DADOS_INICIAIS = os.path.join(os.path.dirname(__file__), '..', 'dados', 'dados_iniciais.json')


def repositorio_basico(vagas_total=2):
    repositorio = RepositorioAcademico()
    return popular_repositorio(repositorio, {
        'cursos': [{'id': 'c1', 'nome': 'Programação Web'}],
        'instrutores': [{'id': 'i1', 'nome': 'Ana Souza'}],
        'ementas': [{'id': 'e1', 'curso_id': 'c1', 'titulo': 'Módulo 1'}],
        'turmas': [
            {'id': 't1', 'codigo': 'WEB-01', 'ementa_id': 'e1', 'status': 'em_andamento',
             'data_inicio': '2024-01-01', 'instrutor_id': 'i1', 'vagas_total': vagas_total},
            {'id': 't2', 'codigo': 'WEB-02', 'ementa_id': 'e1', 'status': 'planejada',
             'data_inicio': '2024-08-01', 'instrutor_id': 'i1', 'vagas_total': vagas_total},
        ],
    })


class TestModelos(unittest.TestCase):

    def test_de_dict_converte_aninhados_e_ignora_chaves_desconhecidas(self):
        aluno = Aluno.de_dict({
            'id': 'a1',
            'nome': 'Lucas',
            'endereco': {'rua': 'Rua A', 'bairro': 'Centro', 'cep': '01000000'},
            'campo_legado': 'ignorado',
        })
        self.assertIsInstance(aluno.endereco, Endereco)
        self.assertEqual(aluno.endereco.bairro, 'Centro')
        self.assertIsNone(aluno.turma_id)

    def test_registros_sao_imutaveis(self):
        aluno = Aluno(id='a1', nome='Lucas')
        with self.assertRaises(FrozenInstanceError):
            aluno.nome = 'Outro'


class TestRepositorioAcademico(unittest.TestCase):

    def setUp(self):
        self.repositorio = repositorio_basico()

    def test_criar_gera_id_e_data(self):
        aluno = self.repositorio.criar('alunos', {'nome': 'Lucas Pereira'})
        self.assertTrue(aluno.id)
        self.assertIsNotNone(aluno.data_matricula)
        self.assertIs(self.repositorio.obter('alunos', aluno.id), aluno)

    def test_criar_sem_campo_obrigatorio(self):
        with self.assertRaises(ErroDeIntegridade):
            self.repositorio.criar('turmas', {'codigo': 'SEM-EMENTA'})

    def test_id_duplicado(self):
        with self.assertRaises(ErroDeIntegridade):
            self.repositorio.criar('cursos', {'id': 'c1', 'nome': 'Repetido'})

    def test_referencia_quebrada_e_recusada(self):
        with self.assertRaises(ErroDeIntegridade):
            self.repositorio.criar('ementas', {'curso_id': 'inexistente', 'titulo': 'X'})
        with self.assertRaises(ErroDeIntegridade):
            self.repositorio.criar('alunos', {'nome': 'Lucas', 'turma_id': 'inexistente'})

    def test_turma_acima_da_capacidade_e_recusada(self):
        with self.assertRaises(ErroDeIntegridade):
            self.repositorio.atualizar('turmas', 't1', {'vagas_ocupadas': 3})

    def test_atualizar_devolve_novo_registro(self):
        antes = self.repositorio.obter('turmas', 't1')
        depois = self.repositorio.atualizar('turmas', 't1', {'status': 'finalizada'})

        self.assertEqual(antes.status, 'em_andamento')
        self.assertEqual(depois.status, 'finalizada')
        self.assertIs(self.repositorio.obter('turmas', 't1'), depois)

    def test_atualizar_inexistente(self):
        with self.assertRaises(RegistroNaoEncontrado):
            self.repositorio.atualizar('alunos', 'nao-existe', {'status': 'ativo'})

    def test_matricula_ocupa_vaga(self):
        aluno = self.repositorio.criar('alunos', {'nome': 'Lucas'})
        aluno = self.repositorio.matricular_aluno(aluno.id, 't1')

        self.assertEqual(aluno.turma_id, 't1')
        self.assertEqual(self.repositorio.obter('turmas', 't1').vagas_ocupadas, 1)

    def test_troca_de_turma_libera_vaga_anterior(self):
        aluno = self.repositorio.criar('alunos', {'nome': 'Lucas'})
        self.repositorio.matricular_aluno(aluno.id, 't1')
        self.repositorio.matricular_aluno(aluno.id, 't2')

        self.assertEqual(self.repositorio.obter('turmas', 't1').vagas_ocupadas, 0)
        self.assertEqual(self.repositorio.obter('turmas', 't2').vagas_ocupadas, 1)

    def test_turma_lotada_recusa_matricula(self):
        for nome in ('Lucas', 'Mariana'):
            aluno = self.repositorio.criar('alunos', {'nome': nome})
            self.repositorio.matricular_aluno(aluno.id, 't1')

        extra = self.repositorio.criar('alunos', {'nome': 'Pedro'})
        with self.assertRaises(ErroDeIntegridade):
            self.repositorio.matricular_aluno(extra.id, 't1')
        self.assertIsNone(self.repositorio.obter('alunos', extra.id).turma_id)

    def test_remover_registro_referenciado_e_recusado(self):
        with self.assertRaises(ErroDeIntegridade):
            self.repositorio.remover('cursos', 'c1')
        with self.assertRaises(ErroDeIntegridade):
            self.repositorio.remover('instrutores', 'i1')

    def test_remover_aluno_libera_vaga(self):
        aluno = self.repositorio.criar('alunos', {'nome': 'Lucas'})
        self.repositorio.matricular_aluno(aluno.id, 't1')
        self.repositorio.remover('alunos', aluno.id)

        self.assertEqual(self.repositorio.obter('turmas', 't1').vagas_ocupadas, 0)
        self.assertIsNone(self.repositorio.obter('alunos', aluno.id))

    def test_snapshot_reaproveitado_ate_a_proxima_mutacao(self):
        primeiro = self.repositorio.snapshot()
        self.assertIs(self.repositorio.snapshot(), primeiro)

        versao = self.repositorio.versao
        self.repositorio.criar('alunos', {'nome': 'Lucas'})

        segundo = self.repositorio.snapshot()
        self.assertIsNot(segundo, primeiro)
        self.assertEqual(len(segundo.alunos), len(primeiro.alunos) + 1)
        self.assertEqual(self.repositorio.versao, versao + 1)

    def test_colecao_desconhecida(self):
        with self.assertRaises(KeyError):
            self.repositorio.listar('responsaveis')


class TestConsultasDoRepositorio(unittest.TestCase):

    def setUp(self):
        self.repositorio = repositorio_basico()
        self.repositorio.criar('ementas', {'id': 'e2', 'curso_id': 'c1', 'titulo': 'Módulo antigo', 'ativo': False})
        self.repositorio.criar('instrutores', {'id': 'i2', 'nome': 'Carlos Lima'})
        for diario_id, turma_id, instrutor_id, data in (
            ('d1', 't1', 'i1', '2024-02-05'),
            ('d2', 't1', 'i1', '2024-02-19'),
            ('d3', 't2', 'i2', '2024-08-05'),
            ('d4', 't1', 'i1', '2024-02-12'),
        ):
            self.repositorio.criar('diarios', {
                'id': diario_id, 'turma_id': turma_id, 'instrutor_id': instrutor_id, 'data': data,
            })

    def test_ementas_por_curso_ignora_inativas(self):
        ementas = self.repositorio.ementas_por_curso('c1')
        self.assertEqual([e.id for e in ementas], ['e1'])
        self.assertEqual(self.repositorio.ementas_por_curso('inexistente'), [])

    def test_diarios_por_turma_mais_recentes_primeiro(self):
        diarios = self.repositorio.diarios_por_turma('t1')
        self.assertEqual([d.id for d in diarios], ['d2', 'd4', 'd1'])

    def test_diarios_por_instrutor_mais_recentes_primeiro(self):
        self.assertEqual([d.id for d in self.repositorio.diarios_por_instrutor('i1')], ['d2', 'd4', 'd1'])
        self.assertEqual([d.id for d in self.repositorio.diarios_por_instrutor('i2')], ['d3'])


class TestConfig(unittest.TestCase):

    def test_data_referencia_vazia_usa_data_do_sistema(self):
        self.assertIsNone(validar_data_referencia(None))
        self.assertIsNone(validar_data_referencia(''))

    def test_data_referencia_valida(self):
        self.assertEqual(validar_data_referencia('2024-02-20'), '2024-02-20')

    def test_data_referencia_malformada_interrompe(self):
        for valor in ('20/02/2024', '2024-13-01', 'ontem'):
            with self.subTest(valor=valor):
                with self.assertRaises(ValueError):
                    validar_data_referencia(valor)


class TestCarregador(unittest.TestCase):

    def test_sem_caminho_repositorio_vazio(self):
        repositorio = carregar_dados_iniciais(None)
        self.assertEqual(repositorio.listar('turmas'), ())

    def test_arquivo_inexistente_repositorio_vazio(self):
        with self.assertLogs('src.core.carregador', level='WARNING'):
            repositorio = carregar_dados_iniciais('/caminho/que/nao/existe.json')
        self.assertEqual(repositorio.listar('alunos'), ())

    def test_json_invalido_interrompe(self):
        with tempfile.TemporaryDirectory() as pasta:
            caminho = os.path.join(pasta, 'dados.json')
            with open(caminho, 'w', encoding='utf-8') as f:
                f.write('{"cursos": [')

            with self.assertRaises(ValueError):
                carregar_dados_iniciais(caminho)

    def test_colecao_desconhecida_e_ignorada(self):
        with tempfile.TemporaryDirectory() as pasta:
            caminho = os.path.join(pasta, 'dados.json')
            with open(caminho, 'w', encoding='utf-8') as f:
                json.dump({'cursos': [{'id': 'c1', 'nome': 'Curso'}], 'responsaveis': [{}]}, f)

            repositorio = carregar_dados_iniciais(caminho)
        self.assertEqual(len(repositorio.listar('cursos')), 1)

    def test_dados_iniciais_do_projeto(self):
        repositorio = carregar_dados_iniciais(ARQUIVO_DADOS_INICIAIS)

        self.assertEqual(len(repositorio.listar('cursos')), 2)
        self.assertEqual(len(repositorio.listar('turmas')), 3)
        self.assertEqual(len(repositorio.listar('alunos')), 6)
        # Vagas ocupadas batem com os alunos vinculados
        for turma in repositorio.listar('turmas'):
            vinculados = [a for a in repositorio.listar('alunos') if a.turma_id == turma.id]
            self.assertEqual(turma.vagas_ocupadas, len(vinculados))
