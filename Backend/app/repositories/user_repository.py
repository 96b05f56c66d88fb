from typing import Optional, List, Dict, Iterable
import logging
from beanie import PydanticObjectId
from beanie.operators import In

from app.models.user import User, UserRole

logger = logging.getLogger(__name__)


class UserRepository:
    """
    Repository for user database operations (MongoDB/Beanie).
    """
    
    async def get_by_id(self, user_id) -> Optional[User]:
        """Get user by ID; malformed ids are treated as missing."""
        if not PydanticObjectId.is_valid(str(user_id)):
            return None
        return await User.get(PydanticObjectId(str(user_id)))
    
    async def get_by_email(self, email: str) -> Optional[User]:
        return await User.find_one(User.email == email.strip().lower())
    
    async def get_many(self, user_ids: Iterable[PydanticObjectId]) -> Dict[str, User]:
        """Fetch several users at once, keyed by string id."""
        ids = list({uid for uid in user_ids if uid is not None})
        if not ids:
            return {}
        users = await User.find(In(User.id, ids)).to_list()
        return {str(user.id): user for user in users}
    
    async def list_all(self) -> List[User]:
        return await User.find_all().sort("-created_at").to_list()
    
    async def create(
        self,
        name: str,
        email: str,
        hashed_password: str,
        role: UserRole = UserRole.USER
    ) -> User:
        user = User(
            name=name.strip(),
            email=email.strip().lower(),
            hashed_password=hashed_password,
            role=role
        )
        await user.insert()
        logger.info(f"Created {role.value} account {user.id}")
        return user
