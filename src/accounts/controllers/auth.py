"""This module contains the controllers for the authentication app."""

import typing as t

from ninja_extra import api_controller, route
from ninja_jwt.controller import TokenObtainPairController
from ninja_jwt.schema import (
    TokenObtainPairInputSchema,
    TokenObtainPairOutputSchema,
    TokenRefreshInputSchema,
    TokenRefreshOutputSchema,
)

from common.throttling import AuthThrottle


@api_controller("/auth", tags=["Auth"], throttle=AuthThrottle())
class AuthController(TokenObtainPairController):
    @route.post("/token/pair", response=TokenObtainPairOutputSchema, url_name="token_obtain_pair")
    def obtain_token(self, user_token: TokenObtainPairInputSchema) -> TokenObtainPairOutputSchema:
        """Authenticate with email and password to obtain JWT access/refresh tokens.

        Use the access token as a `Bearer` token on every nomination endpoint. Refresh it via
        POST /auth/token/refresh before it expires.
        """
        return t.cast(TokenObtainPairOutputSchema, user_token.to_response_schema())  # type: ignore[no-untyped-call]

    @route.post("/token/refresh", response=TokenRefreshOutputSchema, url_name="token_refresh")
    def refresh_token(self, refresh_token: TokenRefreshInputSchema) -> TokenRefreshOutputSchema:
        """Exchange a refresh token for a new access token."""
        return t.cast(TokenRefreshOutputSchema, refresh_token.to_response_schema())  # type: ignore[no-untyped-call]
