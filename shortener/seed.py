"""
Demo data: ``python -m shortener.seed``.

Creates the tables if needed, then inserts three demo users (password
``Demo1234``), a handful of named and random URLs, and some clicks on the
named ones.
"""

import asyncio
import logging
import random

from sqlalchemy.ext.asyncio import AsyncSession

from shortener.core.logging import setup_logging
from shortener.core.security import hash_password
from shortener.core.setting import settings
from shortener.db.models import ShortURL, User
from shortener.db.session import async_session_maker, init_db
from shortener.services.short_code import generate_short_code
from shortener.services.visit_count_service import VisitCountService
from shortener.services.visit_logger import VisitLoggerService

logger = logging.getLogger(__name__)

DEMO_PASSWORD = "Demo1234"
DEMO_USERS = [
    ("demo_user", "demo@example.com"),
    ("alice", "alice@example.com"),
    ("bob", "bob@example.com"),
]
# (destination, short code, index into DEMO_USERS)
DEMO_URLS = [
    ("https://github.com", "github", 0),
    ("https://google.com", "google", 0),
    ("https://stackoverflow.com", "so-demo", 1),
    ("https://reddit.com", "reddit", 1),
    ("https://twitter.com", "twitter", 2),
]
RANDOM_DESTINATIONS = ["https://example.com", "https://test.com", "https://demo.com"]
RANDOM_URL_COUNT = 10
MAX_DEMO_CLICKS = 20


async def seed_database(session: AsyncSession) -> dict[str, int]:
    """
    Insert the demo data through ``session`` and commit.

    Returns:
        Counts of inserted users, urls and clicks
    """
    password_hash = hash_password(DEMO_PASSWORD)
    users = [
        User(username=username, email=email, password_hash=password_hash)
        for username, email in DEMO_USERS
    ]
    session.add_all(users)
    await session.flush()

    named_urls = [
        ShortURL(short_code=code, original_url=url, user_id=users[owner].id)
        for url, code, owner in DEMO_URLS
    ]
    random_codes: set[str] = set()
    while len(random_codes) < RANDOM_URL_COUNT:
        random_codes.add(generate_short_code(settings.SHORT_CODE_LENGTH))
    random_urls = [
        ShortURL(short_code=code, original_url=random.choice(RANDOM_DESTINATIONS))
        for code in sorted(random_codes)
    ]
    session.add_all(named_urls + random_urls)
    await session.flush()

    visit_logger = VisitLoggerService(session)
    visit_counter = VisitCountService(session)
    clicks = 0
    for short_url in named_urls:
        for _ in range(random.randint(0, MAX_DEMO_CLICKS)):
            await visit_logger.log_visit(
                url_id=short_url.id,
                ip_address="127.0.0.1",
                user_agent="Mozilla/5.0 (Demo Browser)",
            )
            await visit_counter.increment_clicks(short_url.id)
            clicks += 1

    await session.commit()
    return {"users": len(users), "urls": len(named_urls) + len(random_urls), "clicks": clicks}


async def run() -> None:
    await init_db()
    async with async_session_maker() as session:
        counts = await seed_database(session)

    logger.info(
        f"Seeded {counts['users']} users, {counts['urls']} URLs and {counts['clicks']} clicks"
    )
    logger.info(f"Demo users: {', '.join(name for name, _ in DEMO_USERS)} (password: {DEMO_PASSWORD})")


if __name__ == "__main__":
    setup_logging(settings.LOG_LEVEL, json_format=settings.LOG_JSON)
    asyncio.run(run())
