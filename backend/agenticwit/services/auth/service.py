# agenticwit/services/auth/service.py
from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from sqlalchemy.exc import IntegrityError

from agenticwit.models.user import User
from agenticwit.repositories.refresh_token import RotationResult
from agenticwit.services._shared.base import BaseService
from agenticwit.services._shared.errors import (
    AccountDisabledError,
    ConflictError,
    DuplicateIdentityError,
    FieldIssue,
    InvalidCredentialsError,
    InvalidTokenError,
    MfaRequiredError,
    NotFoundError,
    TokenExpiredError,
    ValidationError,
    violates_any,
)
from agenticwit.services._shared.policies.password import ensure_password_strength
from agenticwit.services._shared.ports.token_provider import TokenProvider
from agenticwit.services.auth.dto import (
    AuthResultOut,
    AuthTokenConfig,
    ChangePasswordIn,
    LoginIn,
    LogoutIn,
    RefreshIn,
    RegisterIn,
    TokenPairOut,
)
from agenticwit.services.identity.dto import user_to_out

log = logging.getLogger(__name__)

MfaVerifier = Callable[[User, str], bool]


class AuthService(BaseService):
    """
    Session lifecycle: register, login, refresh rotation, logout, password change.

    Access tokens are signed by a pluggable :class:`TokenProvider`. Refresh
    tokens are opaque random strings stored in the ``refresh_tokens`` table;
    each one is single-use and is deleted in the same transaction that stores
    its replacement.
    """

    def __init__(
        self,
        *,
        token_provider: TokenProvider,
        token_cfg: AuthTokenConfig | None = None,
        mfa_verifier: MfaVerifier | None = None,
        **kwargs: Any,
    ) -> None:
        """
        Initialize the service with its dependencies.

        :param token_provider: Adapter for signing access tokens and minting refresh values.
        :param token_cfg: Access/refresh lifetimes.
        :param mfa_verifier: Optional check for MFA codes. Without one, any
            supplied code passes the MFA gate; only its absence is rejected.
        :param kwargs: Forwarded to :class:`BaseService` (ctx, UoW factories, audit sink).
        """
        super().__init__(**kwargs)
        self.tokens = token_provider
        self.cfg = token_cfg or AuthTokenConfig()
        self.mfa_verifier = mfa_verifier

    # ------------------------------------------------------------------ #
    # Register
    # ------------------------------------------------------------------ #

    def register(self, dto: RegisterIn) -> AuthResultOut:
        """
        Create an identity and sign it in.

        :param dto: Registration input.
        :returns: Redacted identity plus a fresh token pair.
        :raises ValidationError: If the password violates the strength policy
            or the email or username is rejected by the user model.
        :raises DuplicateIdentityError: If the email or username is taken.
        """
        ensure_password_strength(dto.password)
        user = self._new_user(dto)

        with self.rw_uow() as uow:
            self._ensure_identity_available(uow, user.email, user.username)
            try:
                uow.users.add(user)
            except IntegrityError as exc:
                raise self._identity_conflict(exc) from exc

            tokens = self._issue_pair(uow, user)
            out = user_to_out(user)

        log.info("auth.registered", extra={"user_id": out.id})
        self.record_audit(
            "USER_REGISTERED",
            "user",
            user_id=out.id,
            details={"email": out.email, "username": out.username},
        )
        return AuthResultOut(user=out, tokens=tokens)

    # ------------------------------------------------------------------ #
    # Login
    # ------------------------------------------------------------------ #

    def login(self, dto: LoginIn) -> AuthResultOut:
        """
        Authenticate credentials and issue a new token pair.

        Unknown email and wrong password raise the same error. The active flag
        is only checked once the password verified, so a disabled account is
        not revealed to someone without its password.

        :raises InvalidCredentialsError: Unknown email or wrong password.
        :raises AccountDisabledError: Account is deactivated.
        :raises MfaRequiredError: MFA enabled and no code supplied.
        """
        with self.rw_uow() as uow:
            user = uow.users.get_by_email(dto.email)
            if user is None or not user.verify_password(dto.password):
                raise InvalidCredentialsError()
            if not user.is_active:
                raise AccountDisabledError()
            if user.mfa_enabled:
                if not dto.mfa_code:
                    raise MfaRequiredError()
                if self.mfa_verifier is not None and not self.mfa_verifier(user, dto.mfa_code):
                    raise InvalidCredentialsError("Invalid MFA code")

            uow.users.touch_last_login(user, self.now_utc())
            tokens = self._issue_pair(uow, user)
            out = user_to_out(user)

        log.info("auth.login", extra={"user_id": out.id})
        self.record_audit("USER_LOGIN", "user", user_id=out.id, details={"email": out.email})
        return AuthResultOut(user=out, tokens=tokens)

    # ------------------------------------------------------------------ #
    # Refresh with atomic rotation
    # ------------------------------------------------------------------ #

    def refresh(self, dto: RefreshIn) -> TokenPairOut:
        """
        Exchange a refresh token for a new pair.

        The presented token is deleted and its replacement inserted in one
        transaction. A second redemption of the same token finds no row and
        fails with :class:`InvalidTokenError`.

        :raises InvalidTokenError: Unknown or already-consumed token.
        :raises TokenExpiredError: Token past its expiry (the row is removed).
        :raises AccountDisabledError: Owner was deactivated after issue.
        """
        now = self.now_utc()
        new_value = self.tokens.new_refresh_token()

        with self.rw_uow() as uow:
            outcome = uow.refresh_tokens.rotate(
                dto.refresh_token,
                new_token=new_value,
                new_expires_at=now + self.cfg.refresh_expires,
                now=now,
            )
            if outcome.result is RotationResult.NOT_FOUND:
                raise InvalidTokenError("Invalid refresh token")
            if outcome.result is RotationResult.EXPIRED:
                # Persist the deletion of the stale row before failing
                uow.commit()
                raise TokenExpiredError("Refresh token expired")

            user = uow.users.get(outcome.user_id)
            if user is None:
                raise InvalidTokenError("Invalid refresh token")
            if not user.is_active:
                raise AccountDisabledError()
            access = self._access_token(user)

        log.info("auth.refreshed", extra={"user_id": outcome.user_id})
        return TokenPairOut(access_token=access, refresh_token=new_value)

    # ------------------------------------------------------------------ #
    # Logout
    # ------------------------------------------------------------------ #

    def logout(self, dto: LogoutIn) -> None:
        """
        Revoke one refresh token of the caller. Idempotent.

        The delete predicate is ``(token, user_id)``, so presenting somebody
        else's token leaves their session untouched.
        """
        auth = self.require_auth()
        with self.rw_uow() as uow:
            removed = uow.refresh_tokens.delete_for_user(dto.refresh_token, auth.user_id)

        log.info("auth.logout", extra={"user_id": auth.user_id, "count": removed})
        self.record_audit("USER_LOGOUT", "user", details={"revoked": removed})

    # ------------------------------------------------------------------ #
    # Change password
    # ------------------------------------------------------------------ #

    def change_password(self, dto: ChangePasswordIn) -> None:
        """
        Replace the caller's password and revoke every refresh token they hold.

        :raises ValidationError: New password violates the strength policy.
        :raises InvalidCredentialsError: Current password does not verify.
        """
        auth = self.require_auth()
        ensure_password_strength(dto.new_password, field="new_password")

        with self.rw_uow() as uow:
            user = uow.users.get(auth.user_id)
            if user is None:
                raise NotFoundError("User", auth.user_id)
            if not user.verify_password(dto.current_password):
                raise InvalidCredentialsError("Current password is incorrect")
            uow.users.set_password(user, dto.new_password)
            revoked = uow.refresh_tokens.delete_all_for_user(user.id)

        log.info("auth.password_changed", extra={"user_id": auth.user_id, "count": revoked})
        self.record_audit("USER_PASSWORD_CHANGED", "user", details={"revoked_sessions": revoked})

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #

    def _access_token(self, user: User) -> str:
        return self.tokens.create_access_token(
            identity=str(user.id),
            additional_claims={"email": user.email, "username": user.username},
            expires_delta=self.cfg.access_expires,
        )

    def _issue_pair(self, uow: Any, user: User) -> TokenPairOut:
        """Persist a new refresh token for ``user`` and sign an access token."""
        refresh = self.tokens.new_refresh_token()
        uow.refresh_tokens.issue(
            user_id=user.id,
            token=refresh,
            expires_at=self.now_utc() + self.cfg.refresh_expires,
        )
        return TokenPairOut(access_token=self._access_token(user), refresh_token=refresh)

    @staticmethod
    def _new_user(dto: RegisterIn) -> User:
        """Build the transient user, reporting model-level rejections as field issues."""
        user = User(first_name=dto.first_name, last_name=dto.last_name)
        issues: list[FieldIssue] = []
        for field, value in (("email", dto.email), ("username", dto.username)):
            try:
                setattr(user, field, value)
            except ValueError as exc:
                issues.append(FieldIssue(field, str(exc)))
        if issues:
            raise ValidationError(issues)
        user.password = dto.password
        return user

    @staticmethod
    def _ensure_identity_available(uow: Any, email: str, username: str) -> None:
        normalized_email = email.strip().lower()
        matches = uow.users.find_by_email_or_username(email, username)
        if any(existing.email == normalized_email for existing in matches):
            raise DuplicateIdentityError("User", "email", "Email already registered")
        if matches:
            raise DuplicateIdentityError("User", "username", "Username already taken")

    @staticmethod
    def _identity_conflict(exc: IntegrityError) -> ConflictError:
        if violates_any(exc, "uq_users_email", "users.email"):
            return DuplicateIdentityError("User", "email", "Email already registered")
        if violates_any(exc, "uq_users_username", "users.username"):
            return DuplicateIdentityError("User", "username", "Username already taken")
        return ConflictError("User", "User already exists")
