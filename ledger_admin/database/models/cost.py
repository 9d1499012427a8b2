from .base_model import BaseModel


class Cost(BaseModel):
    """A cost category, e.g. rent or payroll."""
    _collection = 'costs'
    _allowed_fields = {'name'}
