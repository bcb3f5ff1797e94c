"""Static role ranking used to bound delegation (who may grant which role)."""

from __future__ import annotations

from campus.application.dtos.role import RoleResult
from campus.domain.enums import RoleKind


class RoleHierarchy:
    """Lower level is more privileged; a role may grant roles at its own level or below.

    Custom roles all share one level, so a custom role can grant any custom
    role (including itself) but never a system role.
    """

    @staticmethod
    def level_of(role: RoleResult | RoleKind) -> int:
        kind = role if isinstance(role, RoleKind) else role.kind
        return kind.level

    @classmethod
    def can_assign(cls, source: RoleResult | RoleKind, target: RoleResult | RoleKind) -> bool:
        return cls.level_of(source) <= cls.level_of(target)

    @classmethod
    def assignable_kinds(cls, source: RoleResult | RoleKind) -> list[RoleKind]:
        """Kinds the source may grant, most privileged first."""
        level = cls.level_of(source)
        return sorted((k for k in RoleKind if k.level >= level), key=lambda k: k.level)
