import typing as t

from ninja_extra import ControllerBase, api_controller, route, status
from ninja_jwt.authentication import JWTAuth

from accounts import schema
from accounts.models import NominatorUser
from accounts.service import account as account_service
from common.throttling import AuthThrottle, UserRegistrationThrottle


@api_controller("/account", tags=["Account"], throttle=AuthThrottle())
class AccountController(ControllerBase):
    @route.get(
        "/me",
        response=schema.NominatorUserSchema,
        url_name="me",
        auth=JWTAuth(),
    )
    def me(self) -> NominatorUser:
        """Retrieve the authenticated user's profile information.

        `is_staff` tells the client whether to show the admin area (form configuration and review).
        """
        return t.cast(NominatorUser, self.context.request.user)  # type: ignore[union-attr]

    @route.post(
        "/register",
        response={201: schema.NominatorUserSchema},
        url_name="register-account",
        throttle=UserRegistrationThrottle(),
    )
    def register(self, payload: schema.RegisterUserSchema) -> tuple[int, NominatorUser]:
        """Create a new nominator account with email and password.

        Returns 400 if an account with the same email already exists.
        """
        user = account_service.register_user(payload)
        return status.HTTP_201_CREATED, user
