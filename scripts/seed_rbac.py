"""Seed the global RBAC catalog: default permissions, then the seven system roles.

Usage:
    python -m scripts.seed_rbac
Idempotent: existing permissions and roles are left untouched. Requires
Postgres (DATABASE_URL) and a DB role allowed to write global roles
(BYPASSRLS), since system roles have no tenant.
"""

import asyncio
import sys

from campus.domain.exceptions import CampusException
from campus.infrastructure.persistence.database import dispose_engine, get_session_factory
from campus.infrastructure.services import build_rbac_services
from campus.shared.telemetry.logging import setup_logging


async def main() -> int:
    """Seed permissions and system roles in one transaction."""
    setup_logging()
    try:
        factory = get_session_factory()
    except CampusException as e:
        print(e.message, file=sys.stderr)
        return 1

    try:
        async with factory() as session:
            async with session.begin():
                services = build_rbac_services(session)
                permissions = await services.permissions.seed_default_permissions()
                roles = await services.roles.seed_system_roles()
    finally:
        await dispose_engine()

    print(f"Seeded {permissions} permission(s) and {roles} system role(s)")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
