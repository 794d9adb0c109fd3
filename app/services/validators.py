from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.core.exceptions import (
    PermissionDenied, LastAdminRemoval, DuplicateAccount
)
from app.models.user import User, UserRole


class UserUpdateValidator:
    """Validates profile edits and role changes."""

    def validate_update(self, db: Session, actor: User, target: User,
                        username: str, email: str, role: Optional[str] = None) -> None:
        """Check permissions, the admin invariant and uniqueness for an edit of ``target``."""
        if not actor.is_admin and actor.id != target.id:
            raise PermissionDenied("You can only update your own profile")

        if role is not None and not actor.is_admin:
            raise PermissionDenied("Only admins can change user roles")

        # At least one admin must remain
        if role == UserRole.MEMBER.value and target.is_admin:
            admin_count = db.query(User).filter(User.role == UserRole.ADMIN.value).count()
            if admin_count <= 1:
                raise LastAdminRemoval("At least one admin account must remain in the system")

        conflict = db.query(User).filter(
            User.id != target.id,
            or_(User.email == email, User.username == username)
        ).first()

        if conflict:
            if conflict.email == email:
                raise DuplicateAccount("Email is already in use by another account")
            raise DuplicateAccount("Username is already in use by another account")
