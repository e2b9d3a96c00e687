"""Permission matrix loaded once from the packaged studio configuration."""

from __future__ import annotations

from functools import lru_cache

from studio_config import get_active_config
from studio_config.bridges import build_permission_matrix
from studio_kernel.domain.permissions import PermissionMatrix


@lru_cache(maxsize=1)
def default_permissions() -> PermissionMatrix:
    """The matrix built from ``studio_config/defaults/studio.yaml``."""
    return build_permission_matrix(get_active_config())


def resolve_permissions(permissions: PermissionMatrix | None) -> PermissionMatrix:
    return permissions if permissions is not None else default_permissions()
