from abc import ABC, abstractmethod
from typing import List

from newsiq.models import Article


class NewsSource(ABC):
    name: str
    source_type: str
    priority: int  # lower sorts first when merging

    @abstractmethod
    async def fetch(self, category: str, limit: int) -> List[Article]:
        ...

    async def close(self) -> None:
        return None
