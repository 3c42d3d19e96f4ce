from peerfs.blocks.object_model import *
from peerfs.blocks.object_serialization import *
from peerfs.blocks.content_store import ContentStore
from peerfs.errors import NotFound, IntegrityError

class MemoryContentStore(ContentStore):
    #no locking needed here, because all the dict operations used here are atomic
    _store:dict[ContentId, bytes]

    def __init__(self):
        super().__init__()
        self._store = {}

    async def put(self, data:bytes, codec:Codec=CODEC_RAW) -> ContentId:
        return self.put_sync(data, codec)

    async def get(self, cid:ContentId) -> bytes:
        return self.get_sync(cid)

    async def has(self, cid:ContentId) -> bool:
        return self.has_sync(cid)

    async def put_block(self, cid:ContentId, data:bytes) -> ContentId:
        if not verify_content_id(cid, data):
            raise IntegrityError(f"Block data does not match content id '{to_content_id_str(cid)}'.")
        if cid not in self._store:
            self._store[cid] = bytes(data)
        return cid

    def put_sync(self, data:bytes, codec:Codec=CODEC_RAW) -> ContentId:
        if not isinstance(data, (bytes, bytearray)):
            raise TypeError(f"Expected bytes but got {type(data)}")
        cid = get_content_id(data, codec)
        #the first write wins, identical bytes always produce the same id
        if cid not in self._store:
            self._store[cid] = bytes(data)
        return cid

    def get_sync(self, cid:ContentId) -> bytes:
        data = self._store.get(cid)
        if data is None:
            raise NotFound(f"Block '{_display(cid)}' not found.")
        return data

    def has_sync(self, cid:ContentId) -> bool:
        return cid in self._store

    def __len__(self):
        return len(self._store)

def _display(cid:ContentId) -> str:
    return to_content_id_str(cid) if is_content_id(cid) else repr(cid)
