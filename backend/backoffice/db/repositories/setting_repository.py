"""
Setting repository for key/value settings rows.
"""

from typing import Any, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from backoffice.models.setting import Setting


class SettingRepository:
    """Repository for settings, keyed by name rather than id."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, key: str) -> Optional[Setting]:
        result = await self.session.execute(
            select(Setting).where(Setting.key == key)
        )
        return result.scalar_one_or_none()

    async def get_for_update(self, key: str) -> Optional[Setting]:
        """Get a setting row, locking it until the transaction ends."""
        result = await self.session.execute(
            select(Setting).where(Setting.key == key).with_for_update()
        )
        return result.scalar_one_or_none()

    async def upsert(self, key: str, value: Any) -> Setting:
        """Insert or replace a setting's value."""
        setting = await self.get(key)
        if setting is None:
            setting = Setting(key=key, value=value)
            self.session.add(setting)
        else:
            setting.value = value
        await self.session.flush()
        await self.session.refresh(setting)
        return setting
