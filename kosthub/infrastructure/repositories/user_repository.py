"""Persistence layer for user data."""

from __future__ import annotations

from sqlalchemy.orm import Session, joinedload

from kosthub.domain.entities import Role, User
from kosthub.infrastructure.models import UserModel


class UserRepository:
    """Read access to the users this service notifies and authorizes."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, user_id: int) -> User | None:
        model = (
            self.session.query(UserModel)
            .options(joinedload(UserModel.role))
            .filter(UserModel.id == user_id)
            .first()
        )
        return self._to_entity(model) if model else None

    @staticmethod
    def _to_entity(model: UserModel) -> User:
        return User(
            id=model.id,
            role=Role(id=model.role.id, name=model.role.name, alias=model.role.alias),
            name=model.name,
            email=model.email,
            is_active=model.is_active,
            created_at=model.created_at,
        )


__all__ = ["UserRepository"]
