# Database setup with SQLAlchemy async engine and session factory.
# Uses declarative_base for ORM models; SessionLocal hands out AsyncSessions
# connected to the configured DATABASE_URL.


from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.orm import declarative_base
from venuehours.config import settings

Base = declarative_base()

engine = create_async_engine(settings.DATABASE_URL, echo=False, future=True)
SessionLocal = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)
