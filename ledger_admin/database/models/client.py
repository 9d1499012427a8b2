import logging

from .base_model import BaseModel

logger = logging.getLogger(__name__)


def split_client_name(full_name):
    """'Doe John Paul' -> ('John Paul', 'Doe'). The first word is the last name."""
    parts = full_name.split()
    last_name = parts[0] if parts else ''
    first_name = ' '.join(parts[1:]) or last_name
    return first_name, last_name


class Client(BaseModel):
    _collection = 'clients'
    _allowed_fields = {
        'first_name', 'last_name', 'email', 'phone_number', 'secondary_phone_number',
        'gender', 'birthdate', 'zipcode', 'city', 'address',
    }

    @property
    def display_name(self):
        return ' '.join(p for p in (getattr(self, 'last_name', None), getattr(self, 'first_name', None)) if p)

    @classmethod
    def find_by_name(cls, store, first_name, last_name):
        return cls.find_one(store, {'first_name': first_name, 'last_name': last_name})

    @classmethod
    def resolve_reference(cls, store, reference):
        """
        Returns (client_id, client) for a transaction's client reference.

        An id of an existing client is used as is. Any other non-blank string is
        taken as a client name: a client with the same first and last name is
        reused, otherwise a new one is created with a placeholder email.
        """
        if not isinstance(reference, str) or not reference.strip():
            return reference, None

        existing = cls.find_by_id(store, reference)
        if existing:
            return existing.id, existing

        first_name, last_name = split_client_name(reference.strip())
        existing = cls.find_by_name(store, first_name, last_name)
        if existing:
            return existing.id, existing

        client = cls.create(store, {
            'first_name': first_name,
            'last_name': last_name,
            'email': f"{first_name.lower().replace(' ', '.')}.{last_name.lower()}@example.com",
            'phone_number': '',
            'gender': '',
            'birthdate': None,
            'zipcode': None,
            'city': '',
            'address': '',
        })
        logger.info("Created client %s from transaction reference %r", client.id, reference)
        return client.id, client
