from flask_wtf import FlaskForm
from wtforms import StringField, SubmitField, TextAreaField, IntegerField, SelectField
from wtforms.validators import DataRequired, Email, Optional, NumberRange, URL, Length
from .domain.models import Kingdom


def strip_value(value):
    return value.strip() if isinstance(value, str) else value


def blank_to_none(value):
    """Trim strings and turn blank values into None."""
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


ENDANGERED_CHOICES = [('not_set', 'Not set'), ('yes', 'Yes'), ('no', 'No')]


def endangered_to_choice(value):
    if value is None:
        return 'not_set'
    return 'yes' if value else 'no'


def choice_to_endangered(choice):
    if choice == 'yes':
        return True
    if choice == 'no':
        return False
    return None


class SignInForm(FlaskForm):
    email = StringField('Email', validators=[DataRequired(), Email()], filters=[strip_value])
    submit = SubmitField('Sign In with Email')


class SpeciesForm(FlaskForm):
    """Add/edit form for a species record, plus an encyclopedia pre-fill search."""
    wiki_query = StringField('Search Wikipedia for species info', filters=[strip_value])
    search_wikipedia = SubmitField('Search Wikipedia')

    scientific_name = StringField('Scientific Name', validators=[DataRequired()], filters=[strip_value])
    common_name = StringField('Common Name', validators=[Optional()], filters=[blank_to_none])
    kingdom = SelectField('Kingdom', choices=Kingdom.choices(), default=Kingdom.ANIMALIA.value,
                          validators=[DataRequired()])
    total_population = IntegerField('Total population', validators=[
        Optional(),
        NumberRange(min=1, message='Total population must be a positive number.')
    ])
    image = StringField('Image URL', validators=[
        Optional(),
        URL(require_tld=False, message='Image must be a valid URL.')
    ], filters=[blank_to_none])
    endangered = SelectField('Endangered', choices=ENDANGERED_CHOICES, default='not_set')
    description = TextAreaField('Description', validators=[Optional(), Length(max=10000)],
                                filters=[blank_to_none])
    submit = SubmitField('Add Species')

    def wants_wikipedia_search(self) -> bool:
        return bool(self.search_wikipedia.data)

    def to_payload(self) -> dict:
        """Normalized column values for an insert or update."""
        return {
            'scientific_name': self.scientific_name.data,
            'common_name': self.common_name.data,
            'kingdom': self.kingdom.data,
            'total_population': self.total_population.data,
            'image': self.image.data,
            'description': self.description.data,
            'endangered': choice_to_endangered(self.endangered.data),
        }

    @staticmethod
    def initial_data(species) -> dict:
        """Form data for editing an existing species."""
        return {
            'scientific_name': species.scientific_name,
            'common_name': species.common_name,
            'kingdom': species.kingdom.value,
            'total_population': species.total_population,
            'image': species.image,
            'description': species.description,
            'endangered': endangered_to_choice(species.endangered),
        }


class ConfirmForm(FlaskForm):
    """Empty form carrying only the CSRF token (delete confirmation, sign out)."""
    submit = SubmitField('Confirm')
