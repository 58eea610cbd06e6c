from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
from sqlalchemy.engine.url import make_url
from lynix.config import settings

# libpq-only options; SSL goes through connect_args instead
LIBPQ_ONLY_PARAMS = ("sslmode", "channel_binding")


def get_database_url() -> str:
    """Rewrite Postgres URLs for asyncpg; other async URLs (e.g. sqlite+aiosqlite) are used as given"""
    url = make_url(settings.DATABASE_URL)

    if not url.drivername.startswith("postgres"):
        return settings.DATABASE_URL

    url = url.set(drivername="postgresql+asyncpg", port=url.port or 5432)
    url = url.difference_update_query(LIBPQ_ONLY_PARAMS)

    # render_as_string escapes special characters in the password
    return url.render_as_string(hide_password=False)


def get_connect_args() -> dict:
    """SSL for asyncpg, taken from a libpq-style sslmode parameter"""
    url = make_url(settings.DATABASE_URL)
    connect_args = {}

    if url.query.get("sslmode") == "require":
        connect_args["ssl"] = "require"

    return connect_args


engine = create_async_engine(
    get_database_url(),
    echo=settings.DEBUG,
    future=True,
    pool_pre_ping=True,  # Verify connections before using them
    pool_recycle=3600,  # Recycle connections after 1 hour
    connect_args=get_connect_args()
)

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False
)

Base = declarative_base()


async def get_db():
    """Get database session (generator for FastAPI dependency injection)"""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


async def init_db():
    """Create all tables that do not exist yet"""
    # Import models so every table is registered on Base.metadata
    import lynix.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db():
    """Close database connections"""
    await engine.dispose()
