from abc import ABC, abstractmethod
from peerfs.blocks.object_model import *

class ContentLoader(ABC):
    """Interface for loading blocks from a content-addressed store."""
    @abstractmethod
    async def get(self, cid:ContentId) -> bytes:
        """Returns the block bytes, raises NotFound if the block is not in the store."""
        pass

    @abstractmethod
    def get_sync(self, cid:ContentId) -> bytes:
        pass

    @abstractmethod
    async def has(self, cid:ContentId) -> bool:
        pass

    @abstractmethod
    def has_sync(self, cid:ContentId) -> bool:
        pass

class ContentStore(ContentLoader, ABC):
    """Interface for persisting blocks in a content-addressed store."""
    @abstractmethod
    async def put(self, data:bytes, codec:Codec='raw') -> ContentId:
        """Stores the data (if absent) and returns its content id. Storing the same bytes twice is a no-op."""
        pass

    @abstractmethod
    def put_sync(self, data:bytes, codec:Codec='raw') -> ContentId:
        pass

    @abstractmethod
    async def put_block(self, cid:ContentId, data:bytes) -> ContentId:
        """Stores a block that was obtained elsewhere, after checking that the data matches the id."""
        pass
