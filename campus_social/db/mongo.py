# campus_social/db/mongo.py
from contextlib import asynccontextmanager

from motor.motor_asyncio import AsyncIOMotorClient
from pymongo import ASCENDING, DESCENDING

from ..config import MONGO_URL, MONGO_DB_NAME, USE_TRANSACTIONS

if not MONGO_URL:
    raise RuntimeError("MONGODB_URL env var is not set")

client = AsyncIOMotorClient(MONGO_URL)
db = client[MONGO_DB_NAME]

# Collections
users_collection = db["users"]
follows_collection = db["follows"]              # { follower_id, following_id, created_at }
posts_collection = db["posts"]
comments_collection = db["comments"]
stories_collection = db["stories"]
events_collection = db["events"]
groups_collection = db["groups"]
notifications_collection = db["notifications"]
search_history_collection = db["search_history"]   # { user_id, query, query_key, searched_at }
announcements_collection = db["announcements"]

ALL_COLLECTIONS = (
    users_collection,
    follows_collection,
    posts_collection,
    comments_collection,
    stories_collection,
    events_collection,
    groups_collection,
    notifications_collection,
    search_history_collection,
    announcements_collection,
)


@asynccontextmanager
async def transaction():
    """
    Yields a session bound to an open transaction, or None when
    MONGODB_TRANSACTIONS is off. Pass the yielded value as `session=` to
    every write that must commit together.
    """
    if not USE_TRANSACTIONS:
        yield None
        return
    async with await client.start_session() as session:
        async with session.start_transaction():
            yield session


async def ensure_follow_edge_index() -> None:
    """One edge per ordered pair; follow() relies on it to reject duplicate edges."""
    await follows_collection.create_index(
        [("follower_id", ASCENDING), ("following_id", ASCENDING)],
        unique=True,
        name="follower_following_unique",
    )


# Call once at startup to ensure indexes exist.
async def init_db_indexes() -> None:
    # Users: unique email
    await users_collection.create_index("email", unique=True)
    await users_collection.create_index("name")

    # Follow graph
    await ensure_follow_edge_index()
    # Following list / feed fan-in
    await follows_collection.create_index(
        [("follower_id", ASCENDING), ("created_at", DESCENDING)],
        name="follower_createdAt_desc",
    )
    # Followers list
    await follows_collection.create_index(
        [("following_id", ASCENDING), ("created_at", DESCENDING)],
        name="following_createdAt_desc",
    )

    # Posts (feeds key on created_at with _id as tie-break)
    await posts_collection.create_index(
        [("is_public", ASCENDING), ("created_at", DESCENDING), ("_id", DESCENDING)],
        name="public_feed",
    )
    await posts_collection.create_index(
        [("author_id", ASCENDING), ("created_at", DESCENDING)],
        name="author_createdAt_desc",
    )
    await posts_collection.create_index("tags")

    # Comments
    await comments_collection.create_index([("post_id", ASCENDING), ("created_at", DESCENDING)])

    # Stories: TTL removes documents at 'expires_at'
    await stories_collection.create_index("expires_at", expireAfterSeconds=0)
    await stories_collection.create_index([("author_id", ASCENDING), ("expires_at", ASCENDING)])
    await stories_collection.create_index([("is_active", ASCENDING), ("expires_at", ASCENDING)])

    # Events
    await events_collection.create_index([("start_date", ASCENDING), ("is_public", ASCENDING)])
    await events_collection.create_index([("category", ASCENDING), ("start_date", ASCENDING)])
    await events_collection.create_index([("organizer_id", ASCENDING), ("start_date", ASCENDING)])

    # Groups
    await groups_collection.create_index([("category", ASCENDING), ("privacy", ASCENDING)])
    await groups_collection.create_index([("members", ASCENDING), ("is_active", ASCENDING)])

    # Notifications inbox
    await notifications_collection.create_index(
        [("recipient_id", ASCENDING), ("is_read", ASCENDING), ("created_at", DESCENDING)],
        name="recipient_unread_createdAt_desc",
    )

    # Search history: one row per user and normalised query
    await search_history_collection.create_index(
        [("user_id", ASCENDING), ("query_key", ASCENDING)],
        unique=True,
        name="user_query_unique",
    )
    await search_history_collection.create_index(
        [("user_id", ASCENDING), ("searched_at", DESCENDING)],
        name="user_searchedAt_desc",
    )

    # Announcements: TTL removes documents at 'expires_at' (unset means never)
    await announcements_collection.create_index("expires_at", expireAfterSeconds=0)
    await announcements_collection.create_index(
        [("is_active", ASCENDING), ("priority_rank", DESCENDING), ("created_at", DESCENDING)],
        name="active_priority_createdAt",
    )
    await announcements_collection.create_index([("category", ASCENDING), ("priority_rank", DESCENDING)])
    await announcements_collection.create_index([("target_audience", ASCENDING), ("is_active", ASCENDING)])
    await announcements_collection.create_index([("author_id", ASCENDING), ("created_at", DESCENDING)])
