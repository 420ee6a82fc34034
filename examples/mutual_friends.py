"""Print the friends two users have in common, using credentials from the environment."""

from __future__ import annotations

import asyncio
import logging
import os

from vk_session import AsyncSession, ServerError


async def run_mutual_friends(source_uid: int, target_uid: int) -> None:
    session = AsyncSession.from_env()

    try:
        mutual = await session.friends.get_mutual(source_uid=source_uid, target_uid=target_uid)
    except ServerError as error:
        print(f"friends.getMutual failed ({error.error_code}): {error.error_msg}")
        return

    if not mutual:
        print("no mutual friends")
        return

    profiles = await session.users.get(user_ids=mutual, fields="screen_name")
    for profile in profiles:
        print(f"{profile['id']:>12}  {profile.get('first_name', '')} {profile.get('last_name', '')}")


if __name__ == "__main__":
    logging.basicConfig(level=os.getenv("VK_LOG_LEVEL", "WARNING"))
    asyncio.run(run_mutual_friends(int(os.environ["VK_SOURCE_UID"]), int(os.environ["VK_TARGET_UID"])))
