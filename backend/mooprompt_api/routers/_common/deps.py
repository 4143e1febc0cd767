"""
Role guards shared by the routers.

Usage:
    from mooprompt_api.routers._common import require_management

    @router.delete("/{id}")
    def delete(user: dict = Depends(require_management)): ...
"""

from shared.config.constants import FRONT_OF_HOUSE_ROLES, KITCHEN_ACCESS_ROLES, Roles
from shared.security.auth import current_user_context, level_guard, role_guard

# Any signed-in staff member
current_user = current_user_context

require_admin = role_guard(Roles.ADMIN)
require_management = role_guard(Roles.ADMIN, Roles.MANAGER)
require_front_of_house = role_guard(*sorted(FRONT_OF_HOUSE_ROLES))
require_kitchen = role_guard(*sorted(KITCHEN_ACCESS_ROLES))

# FlowTrak hierarchy (ADMIN > MANAGER > member)
require_flow_manager = level_guard(Roles.MANAGER)
require_flow_admin = level_guard(Roles.ADMIN)
