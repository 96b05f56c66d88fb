"""
Create (or promote) an admin account.

Usage:
    python create_admin.py "Admin Name" admin@example.com 'password'
"""
import asyncio
import sys

from app.core.config import settings
from app.core.database import init_db
from app.services.user_service import UserService


async def main(name: str, email: str, password: str):
    print(f"Connecting to DB: {settings.DATABASE_URL.split('@')[-1] if '@' in settings.DATABASE_URL else 'LOCAL'}") # Mask password
    await init_db()
    
    admin = await UserService().create_admin(name, email, password)
    print(f"✅ Admin ready: {admin.email} ({admin.id})")

if __name__ == "__main__":
    if len(sys.argv) != 4:
        print(__doc__)
        sys.exit(1)
    asyncio.run(main(*sys.argv[1:]))
