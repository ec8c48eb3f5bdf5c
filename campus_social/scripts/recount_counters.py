# campus_social/scripts/recount_counters.py
"""
Rebuild followers/following/posts counters from the source collections.

    python -m campus_social.scripts.recount_counters            # every user
    python -m campus_social.scripts.recount_counters <user_id>  # one user
"""
import asyncio
import sys

from campus_social.controllers.follow_controller import recount_user_counters
from campus_social.db.mongo import users_collection


async def main(user_ids):
    if not user_ids:
        user_ids = [str(u["_id"]) async for u in users_collection.find({}, {"_id": 1})]
    for user_id in user_ids:
        counters = await recount_user_counters(user_id)
        print(user_id, counters)


if __name__ == "__main__":
    asyncio.run(main(sys.argv[1:]))
