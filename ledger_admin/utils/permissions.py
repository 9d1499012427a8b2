# Permission Constants
# Defines roles, the module/action permission matrix and the role presets.

from enum import Enum
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple, Union


class Role(str, Enum):
    SUPER_ADMIN = 'super_admin'
    ADMIN = 'admin'
    MANAGER = 'manager'
    WORKER = 'worker'
    VIEWER = 'viewer'


class Module(str, Enum):
    DASHBOARD = 'dashboard'
    TRANSACTIONS = 'transactions'
    CLIENTS = 'clients'
    CENTERS = 'centers'
    SERVICES = 'services'
    USERS = 'users'
    REPORTS = 'reports'
    SETTINGS = 'settings'
    COSTS = 'costs'


class Action(str, Enum):
    VIEW = 'view'
    CREATE = 'create'
    EDIT = 'edit'
    DELETE = 'delete'
    EXPORT = 'export'


AVAILABLE_ROLES = tuple(r.value for r in Role)
ADMIN_ROLES = (Role.SUPER_ADMIN.value, Role.ADMIN.value)

_CRUD = (Action.VIEW, Action.CREATE, Action.EDIT, Action.DELETE)

# Actions that exist for each module; every matrix is total over these pairs.
MODULE_ACTIONS: Dict[Module, Tuple[Action, ...]] = {
    Module.DASHBOARD: (Action.VIEW, Action.EDIT),
    Module.TRANSACTIONS: _CRUD,
    Module.CLIENTS: _CRUD,
    Module.CENTERS: _CRUD,
    Module.SERVICES: _CRUD,
    Module.USERS: _CRUD,
    Module.REPORTS: (Action.VIEW, Action.EXPORT),
    Module.SETTINGS: (Action.VIEW, Action.EDIT),
    Module.COSTS: _CRUD,
}

# Role presets, listed as the actions each role holds per module.
# Anything not listed is denied.
ROLE_GRANTS: Dict[Role, Dict[Module, Tuple[Action, ...]]] = {
    Role.SUPER_ADMIN: dict(MODULE_ACTIONS),
    Role.ADMIN: {
        Module.DASHBOARD: (Action.VIEW,),
        Module.TRANSACTIONS: _CRUD,
        Module.CLIENTS: _CRUD,
        Module.CENTERS: (Action.VIEW, Action.CREATE, Action.EDIT),
        Module.SERVICES: (Action.VIEW, Action.CREATE, Action.EDIT),
        Module.USERS: (Action.VIEW, Action.CREATE, Action.EDIT),
        Module.REPORTS: (Action.VIEW, Action.EXPORT),
        Module.SETTINGS: (Action.VIEW,),
        Module.COSTS: (Action.VIEW, Action.CREATE, Action.EDIT),
    },
    Role.MANAGER: {
        Module.DASHBOARD: (Action.VIEW,),
        Module.TRANSACTIONS: (Action.VIEW, Action.CREATE, Action.EDIT),
        Module.CLIENTS: (Action.VIEW, Action.CREATE, Action.EDIT),
        Module.CENTERS: (Action.VIEW,),
        Module.SERVICES: (Action.VIEW, Action.CREATE, Action.EDIT),
        Module.REPORTS: (Action.VIEW,),
        Module.COSTS: (Action.VIEW, Action.CREATE, Action.EDIT),
    },
    Role.WORKER: {
        Module.DASHBOARD: (Action.VIEW,),
        Module.TRANSACTIONS: (Action.VIEW, Action.CREATE),
        Module.CLIENTS: (Action.VIEW, Action.CREATE),
        Module.CENTERS: (Action.VIEW,),
        Module.SERVICES: (Action.VIEW,),
        Module.COSTS: (Action.VIEW,),
    },
    Role.VIEWER: {
        Module.DASHBOARD: (Action.VIEW,),
        Module.TRANSACTIONS: (Action.VIEW,),
        Module.CLIENTS: (Action.VIEW,),
        Module.CENTERS: (Action.VIEW,),
        Module.SERVICES: (Action.VIEW,),
        Module.COSTS: (Action.VIEW,),
    },
}


def _value(key: Union[str, Enum]) -> str:
    return key.value if isinstance(key, Enum) else key


def normalize_role(role: Any) -> Role:
    """Unknown or missing roles are treated as the most restrictive one."""
    try:
        return Role(_value(role))
    except ValueError:
        return Role.VIEWER


def is_known_pair(module: Union[str, Module], action: Union[str, Action]) -> bool:
    try:
        return Action(_value(action)) in MODULE_ACTIONS[Module(_value(module))]
    except (ValueError, KeyError):
        return False


class PermissionMatrix(Mapping):
    """
    Read-only, total mapping of (module, action) -> bool.

    Iterates like a nested dict keyed by module name, so it serializes to the
    same shape the front-end has always received:
    {"transactions": {"view": true, "create": false, ...}, ...}
    """

    __slots__ = ('_grants',)

    def __init__(self, grants: Optional[Mapping[Tuple[str, str], bool]] = None):
        grants = grants or {}
        self._grants: Dict[Tuple[str, str], bool] = {
            (module.value, action.value): bool(grants.get((module.value, action.value), False))
            for module, actions in MODULE_ACTIONS.items()
            for action in actions
        }

    def allows(self, module: Union[str, Module], action: Union[str, Action]) -> bool:
        return self._grants.get((_value(module), _value(action)), False)

    def with_overrides(self, overrides: Mapping[str, Mapping[str, bool]]) -> 'PermissionMatrix':
        merged = dict(self._grants)
        for module, actions in sanitize_overrides(overrides).items():
            for action, allowed in actions.items():
                merged[(module, action)] = allowed
        return PermissionMatrix(merged)

    def to_dict(self) -> Dict[str, Dict[str, bool]]:
        return {
            module.value: {action.value: self._grants[(module.value, action.value)] for action in actions}
            for module, actions in MODULE_ACTIONS.items()
        }

    def tokens(self) -> list:
        """Granted permissions as 'module:action' strings."""
        return [f"{module}:{action}" for (module, action), allowed in self._grants.items() if allowed]

    def __getitem__(self, module):
        return self.to_dict()[_value(module)]

    def __iter__(self) -> Iterator[str]:
        return iter(m.value for m in MODULE_ACTIONS)

    def __len__(self) -> int:
        return len(MODULE_ACTIONS)

    def __eq__(self, other):
        if isinstance(other, PermissionMatrix):
            return self._grants == other._grants
        return super().__eq__(other)

    def __hash__(self):
        return hash(frozenset(self._grants.items()))

    def __repr__(self):
        return f"PermissionMatrix({self.tokens()!r})"


def _build_default(role: Role) -> PermissionMatrix:
    grants = ROLE_GRANTS[role]
    return PermissionMatrix({
        (module.value, action.value): True
        for module, actions in grants.items()
        for action in actions
    })


DEFAULT_MATRICES: Dict[Role, PermissionMatrix] = {role: _build_default(role) for role in Role}


def default_matrix(role: Any) -> PermissionMatrix:
    return DEFAULT_MATRICES[normalize_role(role)]


def sanitize_overrides(raw: Any) -> Dict[str, Dict[str, bool]]:
    """
    Keep only recognized module/action pairs whose value is a real boolean.
    Everything else is dropped silently.
    """
    if not isinstance(raw, Mapping):
        return {}

    clean: Dict[str, Dict[str, bool]] = {}
    for module, actions in raw.items():
        if not isinstance(module, str) or not isinstance(actions, Mapping):
            continue
        for action, allowed in actions.items():
            if not isinstance(action, str) or not isinstance(allowed, bool):
                continue
            if is_known_pair(module, action):
                clean.setdefault(module, {})[action] = allowed
    return clean


def effective_permissions(role: Any, overrides: Any = None) -> PermissionMatrix:
    """Role defaults with the user's boolean overrides applied on top."""
    return default_matrix(role).with_overrides(overrides or {})


def has_permission(matrix: Optional[PermissionMatrix], module: Union[str, Module], action: Union[str, Action]) -> bool:
    if matrix is None:
        return False
    return matrix.allows(module, action)


def permission_token(module: Union[str, Module], action: Union[str, Action]) -> str:
    return f"{_value(module)}:{_value(action)}"


# Catalogue for UI grouping
def permission_catalogue() -> Dict[str, Any]:
    return {
        'roles': list(AVAILABLE_ROLES),
        'modules': {module.value: [a.value for a in actions] for module, actions in MODULE_ACTIONS.items()},
        'defaults': {role.value: matrix.to_dict() for role, matrix in DEFAULT_MATRICES.items()},
    }
