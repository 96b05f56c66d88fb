from beanie import Document, Indexed
from pydantic import Field
from datetime import datetime
import enum

class UserRole(str, enum.Enum):
    """User role enumeration."""
    USER = "user"
    ADMIN = "admin"

class User(Document):
    """
    User model.
    Represents an account that owns cars and books services.
    """
    name: str
    email: Indexed(str, unique=True)
    hashed_password: str
    role: UserRole = UserRole.USER
    
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
    
    class Settings:
        name = "users"
    
    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
    
    async def save(self, *args, **kwargs):
        self.updated_at = datetime.utcnow()
        await super().save(*args, **kwargs)
