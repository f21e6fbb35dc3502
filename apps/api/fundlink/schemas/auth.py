"""Auth schemas: CurrentUser."""

import uuid

from pydantic import BaseModel

from fundlink.models.enums import UserRole


class CurrentUser(BaseModel):
    """Lightweight acting-user context decoded from the bearer JWT."""

    user_id: uuid.UUID  # founder / investor profile id, or the admin's id
    role: UserRole
