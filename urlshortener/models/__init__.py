from urlshortener.models.short_url_model import ShortURLModel
from urlshortener.models.create_outcome import BadRequest, Created, CreateOutcome, NeedsConfirmation


__all__ = [
    'ShortURLModel',
    'Created',
    'NeedsConfirmation',
    'BadRequest',
    'CreateOutcome',
]
