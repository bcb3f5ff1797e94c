"""Infrastructure services: RBAC composition root."""

from campus.infrastructure.services.rbac_container import RbacServices, build_rbac_services

__all__ = ["RbacServices", "build_rbac_services"]
