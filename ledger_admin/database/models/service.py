from .base_model import BaseModel


class Service(BaseModel):
    _collection = 'services'
    _allowed_fields = {'name', 'cost', 'tax'}

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.cost = getattr(self, 'cost', None) or 0
        self.tax = getattr(self, 'tax', None) or 0

    @classmethod
    def find_by_name(cls, store, name):
        return cls.find_one(store, {'name': name})
