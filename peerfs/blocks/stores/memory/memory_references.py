from peerfs.blocks.object_model import *
from peerfs.blocks.references import References

class MemoryReferences(References):
    #no locking needed here, because all the dict operations used here are atomic
    _ref:dict[str, ContentId]

    def __init__(self):
        super().__init__()
        self._ref = {}

    async def get(self, ref:str) -> ContentId | None:
        return self._ref.get(ref, None)

    async def get_all(self) -> dict[str, ContentId]:
        return self._ref.copy()

    async def set(self, ref:str, cid:ContentId) -> None:
        self._ref[ref] = cid
