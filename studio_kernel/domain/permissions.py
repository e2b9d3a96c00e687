"""
Permission matrix -- who may perform which workflow action.

One table replaces per-screen role checks.  Built from configuration by
``studio_modules`` and consumed by the workflow engine; the kernel never
reads configuration itself.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from studio_kernel.domain.roles import ActorRole

# Action names used for creation and deletion checks in the matrix.
CREATE_ACTION = "create"
DELETE_ACTION = "delete"


@dataclass(frozen=True)
class PermissionMatrix:
    """Immutable ``(workflow, action) -> permitted roles`` mapping.

    Missing entries deny: an action nobody was granted is forbidden for
    every role.
    """

    grants: Mapping[tuple[str, str], frozenset[ActorRole]]

    @classmethod
    def from_grants(
        cls,
        grants: Iterable[tuple[str, str, Iterable[ActorRole | str]]],
    ) -> PermissionMatrix:
        table: dict[tuple[str, str], frozenset[ActorRole]] = {}
        for workflow, action, roles in grants:
            parsed = frozenset(ActorRole.parse(r) for r in roles)
            key = (workflow, action)
            table[key] = table.get(key, frozenset()) | parsed
        return cls(grants=table)

    def roles_for(self, workflow: str, action: str) -> frozenset[ActorRole]:
        return self.grants.get((workflow, action), frozenset())

    def is_permitted(self, workflow: str, action: str, role: ActorRole) -> bool:
        return role in self.roles_for(workflow, action)
