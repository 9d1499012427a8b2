from .base_model import BaseModel
from ledger_admin.database.store import DESCENDING


class Transaction(BaseModel):
    _collection = 'transactions'
    _allowed_fields = {
        'index', 'date', 'center', 'center_name', 'client', 'client_name', 'cost',
        'worker', 'taxes', 'type_of_transaction', 'type_of_movement', 'frequency',
        'type_of_client', 'service', 'service_name',
    }

    @classmethod
    def last_index(cls, store):
        """Highest index in use, or 0 when there are no transactions yet."""
        last = store.find(cls._collection, sort=[('index', DESCENDING)], limit=1)
        if not last or last[0].get('index') is None:
            return 0
        return int(last[0]['index'])

    @classmethod
    def find_by_center_name(cls, store, center_name):
        return cls.find_all(store, {'center_name': center_name})

    @classmethod
    def find_by_service_name(cls, store, service_name):
        return cls.find_all(store, {'service_name': service_name})

    def to_dict(self):
        data = super().to_dict()
        # Display names mirror the denormalized fields for the front-end tables
        data['client_display_name'] = getattr(self, 'client_name', None)
        data['center_display_name'] = getattr(self, 'center_name', None)
        data['service_display_name'] = getattr(self, 'service_name', None)
        return data
