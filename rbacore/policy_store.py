"""Storage and querying of policy rules grouped by section and type."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from rbacore.assertion import Assertion, Rule


def _matches(rule: Rule, field_index: int, field_values: Sequence[str]) -> bool:
    return all(
        not value or rule[field_index + offset] == value
        for offset, value in enumerate(field_values)
    )


class PolicyStore:
    """Assertions keyed by section name, then by policy type.

    Rules are handed in and out as lists of strings.
    """

    def __init__(self) -> None:
        self.model: dict[str, dict[str, Assertion]] = {}

    def _assertion(self, sec: str, ptype: str) -> Assertion | None:
        return self.model.get(sec, {}).get(ptype)

    def add_policy(self, sec: str, ptype: str, rule: Sequence[str]) -> bool:
        """Add one rule; ``False`` if it was already there or the type is unknown."""
        ast = self._assertion(sec, ptype)
        if ast is None:
            return False
        key = tuple(rule)
        if key in ast.policy:
            return False
        ast.policy[key] = None
        return True

    def add_policies(self, sec: str, ptype: str, rules: Iterable[Sequence[str]]) -> bool:
        """Add all rules, or none of them if any is already present."""
        keys = [tuple(rule) for rule in rules]
        ast = self._assertion(sec, ptype)
        if ast is not None:
            if any(key in ast.policy for key in keys):
                return False
            ast.policy.update(dict.fromkeys(keys))
        return True

    def get_policy(self, sec: str, ptype: str) -> list[list[str]]:
        """Every rule of the given type, in insertion order."""
        ast = self._assertion(sec, ptype)
        if ast is None:
            return []
        return [list(rule) for rule in ast.policy]

    def get_filtered_policy(
        self, sec: str, ptype: str, field_index: int, field_values: Sequence[str]
    ) -> list[list[str]]:
        """Rules whose fields from ``field_index`` on equal ``field_values``;
        an empty value matches anything."""
        ast = self._assertion(sec, ptype)
        if ast is None:
            return []
        return [
            list(rule) for rule in ast.policy if _matches(rule, field_index, field_values)
        ]

    def has_policy(self, sec: str, ptype: str, rule: Sequence[str]) -> bool:
        """Whether exactly this rule is stored."""
        ast = self._assertion(sec, ptype)
        return ast is not None and tuple(rule) in ast.policy

    def get_values_for_field_in_policy(
        self, sec: str, ptype: str, field_index: int
    ) -> list[str]:
        """Distinct values of one field across all rules, in first-seen order."""
        values = dict.fromkeys(rule[field_index] for rule in self.get_policy(sec, ptype))
        return list(values)

    def remove_policy(self, sec: str, ptype: str, rule: Sequence[str]) -> bool:
        """Remove one rule; ``False`` if it was not there."""
        ast = self._assertion(sec, ptype)
        if ast is None:
            return False
        key = tuple(rule)
        if key not in ast.policy:
            return False
        del ast.policy[key]
        return True

    def remove_policies(
        self, sec: str, ptype: str, rules: Iterable[Sequence[str]]
    ) -> bool:
        """Remove all rules, or none of them if any is missing."""
        keys = [tuple(rule) for rule in rules]
        ast = self._assertion(sec, ptype)
        if ast is not None:
            if any(key not in ast.policy for key in keys):
                return False
            for key in keys:
                ast.policy.pop(key, None)
        return True

    def clear_policy(self) -> None:
        """Drop every rule of the ``p`` and ``g`` sections."""
        for sec in ("p", "g"):
            for ast in self.model.get(sec, {}).values():
                ast.policy.clear()

    def remove_filtered_policy(
        self, sec: str, ptype: str, field_index: int, field_values: Sequence[str]
    ) -> tuple[bool, list[list[str]]]:
        """Remove the rules :meth:`get_filtered_policy` would return.

        Returns whether anything was removed and the removed rules.
        """
        if not field_values:
            return False, []
        ast = self._assertion(sec, ptype)
        if ast is None:
            return False, []
        removed = [rule for rule in ast.policy if _matches(rule, field_index, field_values)]
        for rule in removed:
            del ast.policy[rule]
        return bool(removed), [list(rule) for rule in removed]