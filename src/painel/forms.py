from flask_wtf import FlaskForm
from wtforms import StringField
from wtforms.validators import Optional, Regexp, ValidationError

FORMATO_DATA = r'^\d{4}-\d{2}-\d{2}$'


class FiltrosForm(FlaskForm):
    """Filtros do painel, lidos da query string (GET)."""

    class Meta:
        csrf = False  # Somente leitura, sem efeito colateral

    curso_id = StringField('Curso', validators=[Optional()])
    data_inicial = StringField('Data inicial', validators=[
        Optional(),
        Regexp(FORMATO_DATA, message="Data inicial inválida (formato: AAAA-MM-DD)")
    ])
    data_final = StringField('Data final', validators=[
        Optional(),
        Regexp(FORMATO_DATA, message="Data final inválida (formato: AAAA-MM-DD)")
    ])

    def validate_data_final(self, field):
        if self.data_inicial.data and field.data and field.data < self.data_inicial.data:
            raise ValidationError("Data final não pode ser anterior à data inicial")
