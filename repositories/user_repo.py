from typing import List, Optional

from sqlalchemy import delete, select

from core.database import SessionFactory
from core.db_models import AuthTokenRecord, UserEquipmentRecord, UserRecord
from features.equipment.models.equipment_types import UserEquipment
from features.users.models.user_types import UserPreferences, UserProfile

class UserRepository:
    """Accounts, issued tokens and each user's equipment inventory."""

    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    # Accounts

    def create_user(self, user_id: str, created_at: float, email: Optional[str] = None,
                    name: Optional[str] = None, password_hash: Optional[str] = None,
                    password_salt: Optional[str] = None, is_anonymous: bool = True) -> None:
        with self.session_factory() as session:
            session.add(UserRecord(
                user_id=user_id,
                name=name,
                email=email,
                password_hash=password_hash,
                password_salt=password_salt,
                is_anonymous=is_anonymous,
                preferences=UserPreferences().model_dump(mode="json"),
                created_at=created_at
            ))
            session.commit()

    def get_user_record(self, user_id: str) -> Optional[UserRecord]:
        with self.session_factory() as session:
            return session.get(UserRecord, user_id)

    def get_user_record_by_email(self, email: str) -> Optional[UserRecord]:
        with self.session_factory() as session:
            return session.scalars(select(UserRecord).where(UserRecord.email == email)).first()

    def email_exists(self, email: str) -> bool:
        return self.get_user_record_by_email(email) is not None

    def upgrade_anonymous(self, user_id: str, email: str, password_hash: str,
                          password_salt: str, name: Optional[str] = None) -> None:
        with self.session_factory() as session:
            record = session.get(UserRecord, user_id)
            record.email = email
            record.password_hash = password_hash
            record.password_salt = password_salt
            record.is_anonymous = False
            if name:
                record.name = name
            session.commit()

    def get_profile(self, user_id: str) -> Optional[UserProfile]:
        with self.session_factory() as session:
            record = session.get(UserRecord, user_id)
            if record is None:
                return None
            return UserProfile(
                id=record.user_id,
                name=record.name,
                email=record.email,
                preferences=UserPreferences.model_validate(record.preferences or {}),
                equipment_inventory=self._equipment_for(session, user_id),
                is_anonymous=record.is_anonymous
            )

    # Preferences

    def get_preferences(self, user_id: str) -> Optional[UserPreferences]:
        with self.session_factory() as session:
            record = session.get(UserRecord, user_id)
            if record is None:
                return None
            return UserPreferences.model_validate(record.preferences or {})

    def save_preferences(self, user_id: str, preferences: UserPreferences) -> bool:
        with self.session_factory() as session:
            record = session.get(UserRecord, user_id)
            if record is None:
                return False
            record.preferences = preferences.model_dump(mode="json")
            session.commit()
            return True

    # Tokens

    def add_token(self, token: str, user_id: str, issued_at: float) -> None:
        with self.session_factory() as session:
            session.add(AuthTokenRecord(token=token, user_id=user_id, issued_at=issued_at))
            session.commit()

    def get_user_id_for_token(self, token: str) -> Optional[str]:
        with self.session_factory() as session:
            record = session.get(AuthTokenRecord, token)
            return record.user_id if record else None

    def revoke_token(self, token: str) -> bool:
        with self.session_factory() as session:
            result = session.execute(delete(AuthTokenRecord).where(AuthTokenRecord.token == token))
            session.commit()
            return result.rowcount > 0

    # Equipment inventory

    def get_equipment(self, user_id: str) -> List[UserEquipment]:
        with self.session_factory() as session:
            return self._equipment_for(session, user_id)

    def get_equipment_owner(self, user_equipment_id: str) -> Optional[str]:
        with self.session_factory() as session:
            record = session.get(UserEquipmentRecord, user_equipment_id)
            return record.user_id if record else None

    def upsert_equipment(self, user_id: str, equipment: UserEquipment) -> None:
        with self.session_factory() as session:
            session.merge(UserEquipmentRecord(
                user_equipment_id=equipment.id,
                user_id=user_id,
                equipment_id=equipment.equipment_id,
                equipment_type=equipment.equipment_type.value,
                name=equipment.name,
                color=equipment.color,
                size=equipment.size,
                brand=equipment.brand,
                is_favorite=equipment.is_favorite,
                notes=equipment.notes,
                date_added=equipment.date_added
            ))
            session.commit()

    def delete_equipment(self, user_id: str, equipment_id: str) -> bool:
        with self.session_factory() as session:
            result = session.execute(
                delete(UserEquipmentRecord)
                .where(UserEquipmentRecord.user_id == user_id, UserEquipmentRecord.equipment_id == equipment_id)
            )
            session.commit()
            return result.rowcount > 0

    @staticmethod
    def _equipment_for(session, user_id: str) -> List[UserEquipment]:
        records = session.scalars(
            select(UserEquipmentRecord)
            .where(UserEquipmentRecord.user_id == user_id)
            .order_by(UserEquipmentRecord.date_added)
        ).all()
        return [
            UserEquipment(
                id=r.user_equipment_id,
                equipment_id=r.equipment_id,
                equipment_type=r.equipment_type,
                name=r.name,
                color=r.color,
                size=r.size,
                brand=r.brand,
                is_favorite=r.is_favorite,
                notes=r.notes,
                date_added=r.date_added
            )
            for r in records
        ]
