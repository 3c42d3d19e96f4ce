from __future__ import annotations
import logging
from enum import Enum
from peerfs.blocks import *
from peerfs.blocks.stores.memory import MemoryContentStore
from peerfs.errors import InvalidState, LinkError, NotFound, PeerConnectionError
from .config import NodeConfig
from .crypto import PeerIdentity, create_peer_identity
from .network import PeerNetwork
from .peer_link import PeerLink, connect

logger = logging.getLogger(__name__)

class NodeState(Enum):
    UNINITIALIZED = "uninitialized"
    RUNNING = "running"
    STOPPED = "stopped"

class PeerNode:
    """A peer with its own block store, reachable on a PeerNetwork.

    Content that is not in the local store is resolved through the links to other nodes.
    Blocks fetched that way are kept in the local store.
    """
    config:NodeConfig
    network:PeerNetwork

    __state:NodeState
    __store:ContentStore|None
    __identity:PeerIdentity|None
    __private_key:bytes|None
    __addresses:list[str]
    __links:dict[str, PeerLink]

    def __init__(self,
            network:PeerNetwork,
            config:NodeConfig|None=None,
            store:ContentStore|None=None,
            private_key:bytes|None=None,):
        if not isinstance(network, PeerNetwork):
            raise TypeError('network must be a PeerNetwork')
        if store is not None and not isinstance(store, ContentStore):
            raise TypeError('store must be a ContentStore')
        self.network = network
        self.config = config if config is not None else NodeConfig()
        self.__state = NodeState.UNINITIALIZED
        self.__store = store if store is not None else MemoryContentStore()
        self.__identity = None
        self.__private_key = private_key
        self.__addresses = []
        self.__links = {}

    @property
    def state(self) -> NodeState:
        return self.__state

    @property
    def is_running(self) -> bool:
        return self.__state == NodeState.RUNNING

    @property
    def identity(self) -> PeerIdentity|None:
        return self.__identity

    @property
    def peer_id(self) -> str|None:
        return self.__identity.peer_id if self.__identity is not None else None

    @property
    def addresses(self) -> list[str]:
        return list(self.__addresses)

    @property
    def links(self) -> list[PeerLink]:
        return list(self.__links.values())

    @property
    def store(self) -> ContentStore:
        self.__enforce_running()
        return self.__store

    def get_link(self, peer_id:str) -> PeerLink|None:
        return self.__links.get(peer_id)

    #=========================
    # Lifecycle
    #=========================
    async def start(self) -> PeerIdentity:
        if self.__state == NodeState.RUNNING:
            return self.__identity
        if self.__state == NodeState.STOPPED:
            raise InvalidState("Node was stopped and cannot be restarted, create a new node instead.")
        self.__identity = create_peer_identity(self.__private_key)
        try:
            self.__addresses = self.network.listen(self, self.config.listen)
        except PeerConnectionError:
            #stay uninitialized, so that start can be retried
            self.network.unlisten(self)
            self.__identity = None
            raise
        self.__state = NodeState.RUNNING
        logger.info(f"Started node {self.peer_id}, listening on {self.__addresses}")
        return self.__identity

    async def stop(self) -> None:
        if self.__state != NodeState.RUNNING:
            self.__state = NodeState.STOPPED
            return
        for link in list(self.__links.values()):
            link.close()
        self.network.unlisten(self)
        self.__addresses = []
        #in-memory state is discarded, nothing survives a stop
        self.__store = None
        self.__state = NodeState.STOPPED
        logger.info(f"Stopped node {self.peer_id}")

    #=========================
    # Content
    #=========================
    async def publish(self, data:bytes, codec:Codec=CODEC_RAW) -> ContentId:
        self.__enforce_running()
        cid = await self.__store.put(data, codec)
        logger.debug(f"Node {self.peer_id} published '{to_content_id_str(cid)}' ({len(data)} bytes)")
        return cid

    async def has(self, cid:ContentId) -> bool:
        """True if the block is in the local store. Does not ask linked peers."""
        self.__enforce_running()
        return await self.__store.has(cid)

    async def resolve(self, cid:ContentId) -> bytes:
        """Returns the block from the local store, or fetches it from one of the linked peers.

        Links are asked in the order they were established. If no peer has the block,
        NotFound is raised, unless a link failed along the way, then that LinkError is raised.
        """
        self.__enforce_running()
        if await self.__store.has(cid):
            return await self.__store.get(cid)
        link_error = None
        for link in list(self.__links.values()):
            remote = link.remote(self)
            try:
                data = await link.fetch(remote, cid)
                self.__enforce_running()
                await self.__store.put_block(cid, data)
                return data
            except NotFound:
                continue
            except LinkError as e:
                logger.warning(f"Node {self.peer_id} could not fetch '{to_content_id_str(cid)}' from {remote.peer_id}: {e}")
                link_error = e
        if link_error is not None:
            raise link_error
        raise NotFound(f"Block '{to_content_id_str(cid)}' not found locally or on any of the {len(self.__links)} linked peers.")

    #=========================
    # Links
    #=========================
    async def dial(self, address:str) -> PeerLink:
        """Connects to the node listening at the address."""
        self.__enforce_running()
        remote = self.network.lookup(address)
        return await connect(self, remote)

    async def connect(self, other:PeerNode) -> PeerLink:
        self.__enforce_running()
        return await connect(self, other)

    def _attach_link(self, link:PeerLink) -> None:
        self.__links[link.remote(self).peer_id] = link

    def _detach_link(self, link:PeerLink) -> None:
        peer_id = link.remote(self).peer_id
        if self.__links.get(peer_id) is link:
            del self.__links[peer_id]

    async def _serve_block(self, cid:ContentId) -> bytes:
        """Answers a fetch from a linked peer, only from the local store."""
        if not self.is_running:
            raise LinkError(f"Node {self.peer_id} is {self.__state.value}.")
        return await self.__store.get(cid)

    def __enforce_running(self):
        if self.__state != NodeState.RUNNING:
            raise InvalidState(f"Node is {self.__state.value}, it must be running.")

    def __repr__(self) -> str:
        return f"PeerNode({self.peer_id}, {self.__state.value})"
