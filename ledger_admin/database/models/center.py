from .base_model import BaseModel


class Center(BaseModel):
    _collection = 'centers'
    _allowed_fields = {'name'}

    @classmethod
    def find_by_name(cls, store, name):
        return cls.find_one(store, {'name': name})
