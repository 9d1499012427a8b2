import time

from werkzeug.security import generate_password_hash, check_password_hash

from .base_model import BaseModel
from ledger_admin.utils import access
from ledger_admin.utils.permissions import (
    ADMIN_ROLES,
    Role,
    effective_permissions,
    has_permission,
    sanitize_overrides,
)


def hash_password(password):
    return generate_password_hash(password, method='scrypt')


class User(BaseModel):
    _collection = 'users'
    _allowed_fields = {
        'email', 'password_hash', 'first_name', 'last_name', 'percentage',
        'role', 'permissions', 'assigned_centers', 'assigned_services', 'sessions',
    }

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        # Scope lists and the override map are always present, even on old documents
        self.role = getattr(self, 'role', None) or Role.VIEWER.value
        self.permissions = getattr(self, 'permissions', None) or {}
        self.assigned_centers = list(getattr(self, 'assigned_centers', None) or [])
        self.assigned_services = list(getattr(self, 'assigned_services', None) or [])
        self.sessions = [s for s in (getattr(self, 'sessions', None) or []) if isinstance(s, dict)]

    @property
    def is_admin(self):
        return self.role in ADMIN_ROLES

    @property
    def is_super_admin(self):
        return access.is_super_admin(self)

    def check_password(self, password):
        if not getattr(self, 'password_hash', None) or not password:
            return False
        return check_password_hash(self.password_hash, password)

    def effective_permissions(self):
        return effective_permissions(self.role, self.permissions)

    def has_permission(self, module, action, matrix=None):
        return has_permission(matrix or self.effective_permissions(), module, action)

    def can_access_center(self, center_ref):
        return access.can_access_center(self, center_ref)

    def can_access_service(self, service_ref):
        return access.can_access_service(self, service_ref)

    def has_session(self, jti):
        return any(s.get('jti') == jti for s in self._live_sessions())

    def to_dict(self):
        return {
            'id': self.id,
            'email': self.email,
            'first_name': getattr(self, 'first_name', None),
            'last_name': getattr(self, 'last_name', None),
            'percentage': getattr(self, 'percentage', 0),
            'role': self.role,
            'permissions': self.permissions,
            'assigned_centers': self.assigned_centers,
            'assigned_services': self.assigned_services,
            'created_at': getattr(self, 'created_at', None),
            'updated_at': getattr(self, 'updated_at', None),
        }

    @classmethod
    def create(cls, store, data):
        data = dict(data)
        password = data.pop('password', None)
        if password is not None:
            data['password_hash'] = hash_password(password)
        data['email'] = data['email'].strip().lower()
        data.setdefault('role', Role.VIEWER.value)
        data.setdefault('percentage', 0)
        data['permissions'] = sanitize_overrides(data.get('permissions'))
        data['assigned_centers'] = list(data.get('assigned_centers') or [])
        data['assigned_services'] = list(data.get('assigned_services') or [])
        data['sessions'] = []
        return super().create(store, data)

    @classmethod
    def find_by_email(cls, store, email):
        if not email:
            return None
        return cls.find_one(store, {'email': email.strip().lower()})

    @classmethod
    def find_by_role(cls, store, role):
        return cls.find_all(store, {'role': role})

    # --- sessions ---
    # Each login stores {'jti', 'exp'}; exp is the token's epoch expiry or None.

    def _live_sessions(self, now=None):
        now = time.time() if now is None else now
        return [s for s in self.sessions if s.get('exp') is None or s['exp'] > now]

    def add_session(self, store, jti, expires_at=None):
        """Record a new token and drop sessions whose tokens have expired."""
        self.sessions = [*self._live_sessions(), {'jti': jti, 'exp': expires_at}]
        return User.update(store, self.id, {'sessions': self.sessions})

    def remove_session(self, store, jti):
        self.sessions = [s for s in self._live_sessions() if s.get('jti') != jti]
        return User.update(store, self.id, {'sessions': self.sessions})

    def clear_sessions(self, store):
        self.sessions = []
        return User.update(store, self.id, {'sessions': []})
