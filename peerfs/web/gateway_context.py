from __future__ import annotations
import logging
from peerfs.errors import PeerConnectionError
from peerfs.fs import UnixFs
from peerfs.node import NodeConfig, NodeState, PeerLink, PeerNetwork, PeerNode

logger = logging.getLogger(__name__)

class GatewayContext:
    """Holds the two nodes (and their file systems) the gateway works with.

    Node 1 is where content is published, node 2 is where it is read back, through the link to node 1.
    Both nodes are created with the same configuration and live on the same network.
    """
    config:NodeConfig
    network:PeerNetwork
    node1:PeerNode
    node2:PeerNode
    fs1:UnixFs
    fs2:UnixFs

    def __init__(self, config:NodeConfig|None=None, network:PeerNetwork|None=None):
        self.config = config if config is not None else NodeConfig()
        self.network = network if network is not None else PeerNetwork()
        self.node1, self.fs1 = self.__new_node()
        self.node2, self.fs2 = self.__new_node()

    def __new_node(self) -> tuple[PeerNode, UnixFs]:
        node = PeerNode(self.network, self.config)
        return node, UnixFs(node, chunk_size=self.config.chunk_size)

    @property
    def nodes(self) -> list[PeerNode]:
        return [self.node1, self.node2]

    async def create_nodes(self) -> list[PeerNode]:
        """Starts both nodes. Running nodes are kept, stopped nodes are replaced by fresh ones."""
        if self.node1.state == NodeState.STOPPED:
            self.node1, self.fs1 = self.__new_node()
        if self.node2.state == NodeState.STOPPED:
            self.node2, self.fs2 = self.__new_node()
        for node in self.nodes:
            await node.start()
        logger.info(f"Nodes running: {self.node1.peer_id}, {self.node2.peer_id}")
        return self.nodes

    async def map_nodes(self) -> PeerLink:
        """Connects node 1 to node 2: first find node 2's addresses, then dial the first one."""
        if not self.node2.is_running:
            raise PeerConnectionError(f"Cannot connect, node 2 is {self.node2.state.value}.")
        addresses = self.network.find_addresses(self.node2.peer_id)
        if len(addresses) == 0:
            raise PeerConnectionError(f"No addresses found for {self.node2.peer_id}.")
        link = await self.node1.dial(addresses[0])
        logger.info(f"Mapped {self.node1.peer_id} -> {addresses[0]} ({link.status})")
        return link

    async def stop(self) -> None:
        for node in self.nodes:
            await node.stop()
