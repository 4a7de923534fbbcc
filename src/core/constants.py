"""
Constantes Globais do Sistema.
Fonte Única da Verdade para status, tipos e rótulos do domínio acadêmico.
"""

# Valor usado nas distribuições quando o campo não foi preenchido
NAO_INFORMADO = 'Não informado'

# === STATUS ===
STATUS_TURMA = ('planejada', 'em_andamento', 'finalizada', 'cancelada')
STATUS_ALUNO = ('ativo', 'concluido', 'evadido', 'inativo')
STATUS_INSTRUTOR = ('ativo', 'inativo', 'bloqueado')
STATUS_INTERESSADO = ('novo', 'contatado', 'matriculado', 'desistente')
STATUS_PRESENCA = ('presente', 'ausente', 'abonado', 'justificado')

# === TIPOS ===
TIPOS_INTERESSADO = ('aluno', 'voluntario')
TIPOS_AULA = ('teorica', 'pratica', 'avaliacao', 'revisao')
TIPOS_OPORTUNIDADE = ('emprego', 'freelancer', 'processo_seletivo', 'nenhuma')

# Escala das métricas qualitativas (1 = muito insatisfeito, 5 = muito satisfeito)
NIVEIS_SATISFACAO = (1, 2, 3, 4, 5)

# Estimativa usada no painel: 2h por semana durante 12 semanas
HORAS_SEMANAIS_TURMA = 2
SEMANAS_POR_TURMA = 12

# Peso dos diários lançados na pontuação do ranking de instrutores
PESO_DIARIOS_RANKING = 0.5

# Índice = date.weekday() (segunda = 0)
DIAS_SEMANA = ('segunda', 'terça', 'quarta', 'quinta', 'sexta', 'sábado', 'domingo')
