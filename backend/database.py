"""Database configuration and session utilities."""

import logging
import os
import ssl
from typing import Any, Dict
from urllib.parse import parse_qs, urlparse, urlunparse

from dotenv import load_dotenv
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

from core.db_base import Base

load_dotenv()

logger = logging.getLogger(__name__)

LOCAL_DATABASE_URL = "sqlite+aiosqlite:///./shadowing.db"


def _to_async_url(url: str) -> str:
    """Normalize a database URL so SQLAlchemy uses an async driver."""
    if "+asyncpg" in url or "+aiosqlite" in url:
        return url  # already async

    if url.startswith("postgres://"):
        return "postgresql+asyncpg://" + url[len("postgres://") :]

    if url.startswith("postgresql://"):
        return "postgresql+asyncpg://" + url[len("postgresql://") :]

    if url.startswith("sqlite://"):
        return "sqlite+aiosqlite://" + url[len("sqlite://") :]

    return url.replace("+psycopg2", "+asyncpg")


def _resolve_ipv4_host(url: str) -> str:
    """
    Resolve hostname to IPv4 address to avoid IPv6 connectivity issues.
    This is particularly important for Supabase connections in some hosting environments.
    """
    import socket

    parsed = urlparse(url)
    hostname = parsed.hostname

    if not hostname or hostname.replace('.', '').isdigit():  # Already an IP
        return url

    try:
        ipv4_addr = socket.getaddrinfo(hostname, None, socket.AF_INET)[0][4][0]
        netloc = parsed.netloc.replace(hostname, ipv4_addr)
        return urlunparse(parsed._replace(netloc=netloc))
    except (socket.gaierror, IndexError):
        # If resolution fails, return original URL
        return url


def _ssl_enabled(url: str) -> bool:
    """Opt-in via DATABASE_SSL, otherwise honour sslmode=require in the URL."""
    explicit_ssl = os.getenv("DATABASE_SSL")
    if explicit_ssl is not None:
        return explicit_ssl.lower() in {"1", "true", "yes"}

    query_params = {k: v[0].lower() for k, v in parse_qs(urlparse(url).query).items() if v}
    return query_params.get("sslmode") in {"require", "verify-ca", "verify-full"}


def build_engine_args(database_url: str) -> tuple[str, Dict[str, Any]]:
    """Return the async URL and connect args for ``database_url``."""
    if database_url.startswith("sqlite"):
        return _to_async_url(database_url), {}

    database_url = _resolve_ipv4_host(database_url)
    connect_args: Dict[str, Any] = {}
    if _ssl_enabled(database_url):
        connect_args["ssl"] = ssl.create_default_context()
        logger.info("Database SSL: ENABLED")
    else:
        logger.info("Database SSL: DISABLED (local development)")

    connect_args["server_settings"] = {"jit": "off"}

    # asyncpg rejects libpq's sslmode query parameter; SSL is passed via connect_args.
    parsed = urlparse(database_url)
    query = "&".join(part for part in parsed.query.split("&") if part and not part.startswith("sslmode="))
    database_url = urlunparse(parsed._replace(query=query))

    return _to_async_url(database_url), connect_args


DATABASE_URL = os.getenv("SUPABASE_DB_URL") or os.getenv("DATABASE_URL")
if not DATABASE_URL:
    logger.warning("Neither SUPABASE_DB_URL nor DATABASE_URL is set; using %s", LOCAL_DATABASE_URL)
    DATABASE_URL = LOCAL_DATABASE_URL

ASYNC_URL, connect_args = build_engine_args(DATABASE_URL)

engine = create_async_engine(
    ASYNC_URL,
    echo=os.getenv("DATABASE_ECHO", "").lower() in {"1", "true", "yes"},
    future=True,
    connect_args=connect_args,
)

# Async session factory
SessionLocal = sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


async def init_models() -> None:
    """Create missing tables; schema migrations are managed outside this service."""
    import models  # noqa: F401  ensure models register with Base

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_db():
    """FastAPI dependency that yields a single async session per request."""
    async with SessionLocal() as session:
        yield session
