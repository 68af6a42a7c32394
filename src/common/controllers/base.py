import typing as t

from ninja_extra import ControllerBase

from accounts.models import NominatorUser


class UserAwareController(ControllerBase):
    def user(self) -> NominatorUser:
        """Get the authenticated user for this request."""
        return t.cast(NominatorUser, self.context.request.user)  # type: ignore[union-attr]
