import asyncio
import os
from peerfs.blocks import *
from peerfs.blocks.stores.memory import MemoryContentStore
from peerfs.node import *

def get_random_content_id() -> ContentId:
    return get_content_id(os.urandom(20))

async def start_nodes(count:int=2, config:NodeConfig=None, network:PeerNetwork=None) -> list[PeerNode]:
    if network is None:
        network = PeerNetwork()
    nodes = [PeerNode(network, config) for _ in range(count)]
    for node in nodes:
        await node.start()
    return nodes

class SlowContentStore(MemoryContentStore):
    """A store that takes its time to answer, to run into fetch timeouts."""
    def __init__(self, delay:float):
        super().__init__()
        self.delay = delay

    async def get(self, cid:ContentId) -> bytes:
        await asyncio.sleep(self.delay)
        return await super().get(cid)

class ForgingContentStore(MemoryContentStore):
    """A store that answers every request with the wrong bytes."""
    async def get(self, cid:ContentId) -> bytes:
        await super().get(cid)
        return b"forged"
