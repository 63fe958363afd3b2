"""Role hierarchies: which names inherit which roles, optionally per domain."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable

MatchingFn = Callable[[str, str], bool]

DEFAULT_DOMAIN = "DEFAULT"


class RbacError(Exception):
    """Raised when a role operation refers to names that do not exist."""


class RoleManager(ABC):
    """Interface of a store of role inheritance links."""

    @abstractmethod
    def clear(self) -> None:
        """Forget every role and link."""

    @abstractmethod
    def add_link(self, name1: str, name2: str, domain: str | None = None) -> None:
        """Make ``name1`` inherit role ``name2``."""

    @abstractmethod
    def matching_fn(
        self,
        role_matching_fn: MatchingFn | None,
        domain_matching_fn: MatchingFn | None,
    ) -> None:
        """Set the pattern functions used to match role and domain names."""

    @abstractmethod
    def delete_link(self, name1: str, name2: str, domain: str | None = None) -> None:
        """Remove the link from ``name1`` to ``name2``."""

    @abstractmethod
    def has_link(self, name1: str, name2: str, domain: str | None = None) -> bool:
        """Whether ``name1`` inherits ``name2``, directly or indirectly."""

    @abstractmethod
    def get_roles(self, name: str, domain: str | None = None) -> list[str]:
        """The roles ``name`` inherits directly."""

    @abstractmethod
    def get_users(self, name: str, domain: str | None = None) -> list[str]:
        """The names that inherit role ``name`` directly."""


class _Role:
    __slots__ = ("name", "roles")

    def __init__(self, name: str, roles: list[_Role] | None = None) -> None:
        self.name = name
        self.roles: list[_Role] = roles if roles is not None else []

    def copy(self) -> _Role:
        return _Role(self.name, list(self.roles))

    def add_role(self, other: _Role) -> bool:
        if any(role is other for role in self.roles):
            return False
        self.roles.append(other)
        return True

    def delete_role(self, other: _Role) -> None:
        self.roles = [role for role in self.roles if role.name != other.name]

    def has_role(self, name: str, hierarchy_level: int) -> bool:
        if self.name == name:
            return True
        if hierarchy_level <= 0:
            return False
        return any(role.has_role(name, hierarchy_level - 1) for role in self.roles)

    def role_names(self) -> list[str]:
        return [role.name for role in self.roles]

    def has_direct_role(self, name: str) -> bool:
        return any(role.name == name for role in self.roles)


class DefaultRoleManager(RoleManager):
    """In-memory role manager with optional pattern matching of names."""

    def __init__(self, max_hierarchy_level: int) -> None:
        self.max_hierarchy_level = max_hierarchy_level
        self._domains: dict[str, dict[str, _Role]] = {}
        self._role_matching_fn: MatchingFn | None = None
        self._domain_matching_fn: MatchingFn | None = None

    def _create_role(self, name: str, domain: str | None) -> _Role:
        domain_name = domain if domain is not None else DEFAULT_DOMAIN
        roles = self._domains.setdefault(domain_name, {})
        role = roles.get(name)
        if role is not None:
            return role

        role = roles[name] = _Role(name)
        if self._role_matching_fn is not None:
            for key, other in roles.items():
                if key != name and self._role_matching_fn(name, key):
                    role.add_role(other)
        return role

    def _matched_domains(self, domain: str | None) -> list[str]:
        domain_name = domain if domain is not None else DEFAULT_DOMAIN
        if self._domain_matching_fn is not None:
            return [key for key in self._domains if self._domain_matching_fn(domain_name, key)]
        return [domain_name] if domain_name in self._domains else []

    def _create_temp_role(self, name: str, domain: str | None) -> _Role:
        temp = self._create_role(name, domain).copy()
        for matched in self._matched_domains(domain):
            if matched == domain:
                continue
            for direct in list(self._create_role(name, matched).roles):
                temp.add_role(direct)
        return temp

    def has_role(self, name: str, domain: str | None = None) -> bool:
        """Whether ``name`` is known in a domain matching ``domain``."""
        for matched in self._matched_domains(domain):
            roles = self._domains.get(matched)
            if roles is None:
                continue
            if name in roles:
                return True
            if self._role_matching_fn is not None and any(
                self._role_matching_fn(name, key) for key in roles
            ):
                return True
        return False

    def clear(self) -> None:
        self._domains.clear()

    def add_link(self, name1: str, name2: str, domain: str | None = None) -> None:
        if name1 == name2:
            return
        role1 = self._create_role(name1, domain)
        role2 = self._create_role(name2, domain)
        role1.add_role(role2)

    def matching_fn(
        self,
        role_matching_fn: MatchingFn | None,
        domain_matching_fn: MatchingFn | None,
    ) -> None:
        self._domain_matching_fn = domain_matching_fn
        self._role_matching_fn = role_matching_fn

    def delete_link(self, name1: str, name2: str, domain: str | None = None) -> None:
        """Remove the link; raise :class:`RbacError` if either name is unknown."""
        if not self.has_role(name1, domain) or not self.has_role(name2, domain):
            raise RbacError(f"{name1} OR {name2}")
        role1 = self._create_role(name1, domain)
        role2 = self._create_role(name2, domain)
        role1.delete_role(role2)

    def has_link(self, name1: str, name2: str, domain: str | None = None) -> bool:
        if name1 == name2:
            return True
        if not (self.has_role(name1, domain) and self.has_role(name2, domain)):
            return False
        if self._domain_matching_fn is not None:
            role = self._create_temp_role(name1, domain)
        else:
            role = self._create_role(name1, domain)
        return role.has_role(name2, self.max_hierarchy_level)

    def get_roles(self, name: str, domain: str | None = None) -> list[str]:
        if not self.has_role(name, domain):
            return []
        return self._create_temp_role(name, domain).role_names()

    def get_users(self, name: str, domain: str | None = None) -> list[str]:
        users: dict[str, None] = {}
        for matched in self._matched_domains(domain):
            for role in self._domains.get(matched, {}).values():
                if role.has_direct_role(name):
                    users[role.name] = None
        return list(users)