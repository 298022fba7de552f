"""Account signup through the external identity provider."""

import structlog

from storefront.core.auth import Role
from storefront.core.exceptions import IdentityExistsError, ValidationError
from storefront.domain.events import EventType
from storefront.domain.sanitize import is_missing, sanitize
from storefront.integrations.identity_provider import IdentityProvider
from storefront.services.event_tracker import EventTracker

logger = structlog.get_logger(__name__)

SIGNUP_FIELDS = ("email", "password", "name")


class AccountService:
    def __init__(self, provider: IdentityProvider, tracker: EventTracker):
        self.provider = provider
        self.tracker = tracker

    async def signup(self, data: dict) -> dict:
        """Create a confirmed account with the default ``user`` role.

        Signing up an address that already exists is reported as success.
        """
        missing = [name for name in SIGNUP_FIELDS if is_missing(data.get(name))]
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

        email = str(data["email"]).strip()
        name = sanitize(str(data["name"]))

        try:
            user = await self.provider.create_user(
                email=email,
                password=str(data["password"]),
                # Role is always assigned server-side; admins are promoted out of band
                user_metadata={"name": name, "role": Role.USER.value},
            )
        except IdentityExistsError:
            logger.info("signup_existing_user", email=email)
            return {"success": True, "message": "User already exists"}

        logger.info("signup_completed", email=email)
        await self.tracker.record(EventType.USER_SIGNUP, {"email": email, "name": name})
        return {"success": True, "user": user}
