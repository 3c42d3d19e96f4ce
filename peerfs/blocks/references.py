from abc import ABC, abstractmethod
from peerfs.blocks.object_model import ContentId

class References(ABC):
    """Interface for saving and querying named, mutable pointers to content ids."""
    @abstractmethod
    async def get(self, ref:str) -> ContentId | None:
        pass

    @abstractmethod
    async def get_all(self) -> dict[str, ContentId]:
        pass

    @abstractmethod
    async def set(self, ref:str, cid:ContentId) -> None:
        pass

# Helper functions to create correcly formated references
def ref_fs_root(name:str="root") -> str:
    return f"mfs/{name}"
