from motor.motor_asyncio import AsyncIOMotorClient
from beanie import init_beanie
from app.core.config import settings


async def init_db(database=None):
    """
    Initialize MongoDB connection and Beanie ODM.

    A database handle may be passed in (tests hand over a mock database);
    otherwise one is opened from DATABASE_URL.
    """
    if database is None:
        client = AsyncIOMotorClient(settings.DATABASE_URL)
        
        # Selecting the database name from the URL or default
        default_db = client.get_default_database(default=settings.DATABASE_NAME)
        database = client[default_db.name]

    # Import models
    from app.models.user import User
    from app.models.car import Car
    from app.models.service import Service

    # Initialize Beanie
    await init_beanie(
        database=database,
        document_models=[
            User,
            Car,
            Service
        ]
    )
