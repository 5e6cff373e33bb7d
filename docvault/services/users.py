"""User and manager management (managers are ADMIN or SUPERVISOR principals)."""

import logging

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from docvault.core.context import CallerIdentity
from docvault.core.errors import (
    DataIntegrityError,
    ForbiddenActionError,
    ForbiddenError,
    IdNotFoundError,
    InvalidFieldValueError,
)
from docvault.core.security import hash_password
from docvault.models.user import MANAGER_ROLES, Role, User
from docvault.schemas.common import Page
from docvault.schemas.users import UserBasic, UserDetail, UserRegistration, UserUpdate
from docvault.services.access import require_caller, require_role
from docvault.services.auditing import stamp
from docvault.services.auth import AuthService
from docvault.services.paging import PageRequest, paginate

logger = logging.getLogger(__name__)

USER_SORT_FIELDS = {"id", "username", "names", "role", "active", "created_at", "modified_at"}


class UserService:
    """Every public method takes the caller explicitly and checks its role first."""

    def __init__(self, db: Session, auth: AuthService) -> None:
        self.db = db
        self.auth = auth

    # Lookups

    def _find(self, user_id: int, managers: bool) -> User:
        user = self.db.get(User, user_id)
        is_manager = user is not None and Role(user.role) in MANAGER_ROLES
        if user is None or is_manager != managers:
            key = "exception_id_not_found_manager_detail" if managers else "exception_id_not_found_user_detail"
            raise IdNotFoundError(f"User {user_id} not found", detail_key=key, detail_args=(user_id,))
        return user

    def get_manager(self, caller: CallerIdentity | None, user_id: int) -> UserDetail:
        require_role(caller, Role.ADMIN, Role.SUPERVISOR)
        return UserDetail.model_validate(self._find(user_id, managers=True))

    def get_user(self, caller: CallerIdentity | None, user_id: int) -> UserDetail:
        require_role(caller, Role.ADMIN, Role.SUPERVISOR)
        return UserDetail.model_validate(self._find(user_id, managers=False))

    def _list(self, roles: list[str], request: PageRequest) -> Page[UserBasic]:
        stmt = select(User).where(User.role.in_(roles))
        rows, total, pages = paginate(self.db, stmt, User, request)
        return Page[UserBasic](
            content=[UserBasic.model_validate(u) for u in rows],
            page=request.page,
            size=request.size,
            total_elements=total,
            total_pages=pages,
        )

    def list_managers(self, caller: CallerIdentity | None, request: PageRequest) -> Page[UserBasic]:
        require_role(caller, Role.ADMIN, Role.SUPERVISOR)
        return self._list([Role.ADMIN.value, Role.SUPERVISOR.value], request)

    def list_users(self, caller: CallerIdentity | None, request: PageRequest) -> Page[UserBasic]:
        require_role(caller, Role.ADMIN, Role.SUPERVISOR)
        return self._list([Role.USER.value], request)

    def get_profile(self, caller: CallerIdentity | None) -> UserDetail:
        caller = require_caller(caller)
        user = self.db.get(User, caller.caller_id)
        if user is None:
            raise IdNotFoundError(
                f"User {caller.caller_id} not found",
                detail_key="exception_id_not_found_user_detail",
                detail_args=(caller.caller_id,),
            )
        return UserDetail.model_validate(user)

    # Writes

    def _save(self, user: User, caller: CallerIdentity | None) -> User:
        stamp(user, caller.caller_id if caller else None)
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise DataIntegrityError(str(e.orig)) from e
        self.db.refresh(user)
        return user

    def _check_username_free(self, username: str, exclude_id: int | None = None) -> None:
        stmt = select(User.id).where(func.lower(User.username) == username.lower())
        if exclude_id is not None:
            stmt = stmt.where(User.id != exclude_id)
        if self.db.execute(stmt).first() is not None:
            raise DataIntegrityError(f"Username {username!r} already exists")

    def _create(self, caller: CallerIdentity, body: UserRegistration) -> int:
        self._check_username_free(body.username)
        user = User(
            username=body.username,
            password_hash=hash_password(body.password),
            names=body.names,
            email=body.email,
            id_card=body.id_card,
            role=body.role.value,
            active=True,
            locked=False,
        )
        user = self._save(user, caller)
        logger.info(
            "User created: id=%s role=%s by caller_id=%s", user.id, user.role, caller.caller_id
        )
        return user.id

    def create_manager(self, caller: CallerIdentity | None, body: UserRegistration) -> int:
        caller = require_role(caller, Role.ADMIN)
        if body.role not in MANAGER_ROLES:
            raise InvalidFieldValueError(
                "Managers can only have ADMIN or SUPERVISOR role", detail_key="error_manager_role"
            )
        return self._create(caller, body)

    def create_user(self, caller: CallerIdentity | None, body: UserRegistration) -> int:
        caller = require_role(caller, Role.ADMIN, Role.SUPERVISOR)
        if body.role in MANAGER_ROLES:
            raise InvalidFieldValueError(
                "Users cannot have ADMIN or SUPERVISOR role", detail_key="error_user_role"
            )
        return self._create(caller, body)

    def _apply_update(self, user: User, body: UserUpdate, caller: CallerIdentity) -> None:
        changes = body.model_dump(exclude_none=True, exclude={"password"})
        if "username" in changes:
            self._check_username_free(changes["username"], exclude_id=user.id)
        if "role" in changes:
            changes["role"] = changes["role"].value
        for name, value in changes.items():
            setattr(user, name, value)
        if body.password is not None:
            user.password_hash = hash_password(body.password)
        self._save(user, caller)

    def update_manager(self, caller: CallerIdentity | None, user_id: int, body: UserUpdate) -> None:
        caller = require_role(caller, Role.ADMIN)
        if body.role is not None and body.role not in MANAGER_ROLES:
            raise InvalidFieldValueError(
                "Managers can only have ADMIN or SUPERVISOR role", detail_key="error_manager_role"
            )
        self._apply_update(self._find(user_id, managers=True), body, caller)

    def update_user(self, caller: CallerIdentity | None, user_id: int, body: UserUpdate) -> None:
        caller = require_role(caller, Role.ADMIN, Role.SUPERVISOR)
        if body.role is not None and body.role in MANAGER_ROLES:
            raise InvalidFieldValueError(
                "Users cannot have ADMIN or SUPERVISOR role", detail_key="error_user_role"
            )
        self._apply_update(self._find(user_id, managers=False), body, caller)

    def update_own_profile(self, caller: CallerIdentity | None, body: UserUpdate) -> None:
        """Only USER principals edit themselves here; managers go through management."""
        caller = require_role(caller, Role.USER)
        if body.role is not None and body.role in MANAGER_ROLES:
            raise InvalidFieldValueError(
                "Users cannot have ADMIN or SUPERVISOR role", detail_key="error_user_role"
            )
        self._apply_update(self._find(caller.caller_id, managers=False), body, caller)

    def _delete(self, caller: CallerIdentity, user: User) -> None:
        user_id = user.id
        self.db.delete(user)
        self.db.commit()
        self.auth.revoke_all_for_user(caller, user_id, missing_ok=True)
        logger.info("User deleted: id=%s by caller_id=%s", user_id, caller.caller_id)

    def delete_manager(self, caller: CallerIdentity | None, user_id: int) -> None:
        caller = require_role(caller, Role.ADMIN)
        user = self._find(user_id, managers=True)
        if user.id == caller.caller_id:
            raise ForbiddenActionError("Cannot delete own account", detail_key="error_delete_own_user")
        self._delete(caller, user)

    def delete_user(self, caller: CallerIdentity | None, user_id: int) -> None:
        caller = require_role(caller, Role.ADMIN, Role.SUPERVISOR)
        user = self.db.get(User, user_id)
        if user is None:
            raise IdNotFoundError(
                f"User {user_id} not found",
                detail_key="exception_id_not_found_user_detail",
                detail_args=(user_id,),
            )
        if user.id == caller.caller_id:
            raise ForbiddenActionError("Cannot delete own account", detail_key="error_delete_own_user")
        if Role(user.role) in MANAGER_ROLES:
            raise ForbiddenActionError("Cannot delete a manager as a user", detail_key="error_delete_user")
        self._delete(caller, user)

    def _deactivate(self, caller: CallerIdentity, user: User) -> None:
        user.active = False
        self._save(user, caller)
        revoked = self.auth.revoke_all_for_user(caller, user.id, missing_ok=True)
        logger.info(
            "User deactivated: id=%s sessions_removed=%s by caller_id=%s",
            user.id,
            revoked,
            caller.caller_id,
        )

    def deactivate_manager(self, caller: CallerIdentity | None, user_id: int) -> None:
        caller = require_role(caller, Role.ADMIN)
        user = self.db.get(User, user_id)
        if user is None:
            raise IdNotFoundError(
                f"User {user_id} not found",
                detail_key="exception_id_not_found_manager_detail",
                detail_args=(user_id,),
            )
        if user.id == caller.caller_id:
            raise ForbiddenActionError(
                "Cannot deactivate own account", detail_key="error_deactivate_own_user"
            )
        if Role(user.role) not in MANAGER_ROLES:
            raise ForbiddenActionError(
                "Target is not a manager", detail_key="error_deactivate_manager"
            )
        self._deactivate(caller, user)

    def deactivate_user(self, caller: CallerIdentity | None, user_id: int) -> None:
        caller = require_role(caller, Role.ADMIN, Role.SUPERVISOR)
        user = self.db.get(User, user_id)
        if user is None:
            raise IdNotFoundError(
                f"User {user_id} not found",
                detail_key="exception_id_not_found_user_detail",
                detail_args=(user_id,),
            )
        if Role(user.role) in MANAGER_ROLES:
            raise ForbiddenError("Target is a manager", detail_key="error_deactivate_user")
        self._deactivate(caller, user)

    def revoke_sessions(self, caller: CallerIdentity | None, user_id: int) -> int:
        """Remove every session of user_id (404 when there are none)."""
        return self.auth.revoke_all_for_user(caller, user_id)
