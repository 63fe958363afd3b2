"""A model built from keyed definitions, holding the policy rules under them."""

from __future__ import annotations

from rbacore.assertion import Assertion
from rbacore.policy_store import PolicyStore
from rbacore.role_manager import RoleManager
from rbacore.util import escape_assertion, remove_comment

_TOKENISED_SECTIONS = frozenset({"r", "p"})


class DefaultModel(PolicyStore):
    """Definitions keyed by section (``r``, ``p``, ``g``, ``e``, ``m``) and key.

    Request and policy definitions are split into tokens such as ``r_sub``.
    Every other definition has its ``r.x``/``p.x`` accessors escaped to
    ``r_x``/``p_x``.
    """

    def __init__(self) -> None:
        super().__init__()

    def add_def(self, sec: str, key: str, value: str) -> bool:
        """Add or replace the definition ``key`` in section ``sec``.

        Comments are stripped first; returns ``False`` and adds nothing when
        no definition is left.
        """
        text = remove_comment(value)
        if not text:
            return False

        ast = Assertion(key=key, value=text)
        if sec in _TOKENISED_SECTIONS:
            ast.tokens = [f"{key}_{part.strip()}" for part in text.split(",")]
        else:
            ast.value = escape_assertion(text)

        self.model.setdefault(sec, {})[key] = ast
        return True

    def build_role_links(self, rm: RoleManager) -> None:
        """Load the rules of every role definition into ``rm``."""
        for ast in self.model.get("g", {}).values():
            ast.build_role_links(rm)