"""A single definition line of a model, with the policy rules under it."""

from __future__ import annotations

from dataclasses import dataclass, field

from rbacore.role_manager import DefaultRoleManager, RoleManager

Rule = tuple[str, ...]


class ModelError(Exception):
    """Raised when a model definition is malformed or unsupported."""


class PolicyError(Exception):
    """Raised when a policy rule does not fit its definition."""


@dataclass
class Assertion:
    """One keyed definition (``r``, ``p``, ``g``, ``e`` or ``m``) of a model.

    ``policy`` keeps the rules in insertion order without duplicates.
    """

    key: str = ""
    value: str = ""
    tokens: list[str] = field(default_factory=list)
    policy: dict[Rule, None] = field(default_factory=dict)
    rm: RoleManager = field(default_factory=lambda: DefaultRoleManager(0))

    def build_role_links(self, rm: RoleManager) -> None:
        """Feed every grouping rule into ``rm`` and keep ``rm`` as this
        assertion's role manager.

        Raises :class:`ModelError` when the definition has fewer than two
        ``_`` placeholders or more than one domain, and :class:`PolicyError`
        when a rule is shorter than the definition.
        """
        count = self.value.count("_")
        if count < 2:
            raise ModelError('the number of "_" in role definition should be at least 2')
        for rule in self.policy:
            if len(rule) < count:
                raise PolicyError(
                    f"policy definition expects {count} fields, rule has {len(rule)}"
                )
            if count == 2:
                rm.add_link(rule[0], rule[1], None)
            elif count == 3:
                rm.add_link(rule[0], rule[1], rule[2])
            else:
                raise ModelError("Multiple domains are not supported")
        self.rm = rm