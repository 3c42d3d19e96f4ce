from __future__ import annotations
import asyncio
import logging
from typing import TYPE_CHECKING
from peerfs.blocks import *
from peerfs.errors import LinkError, PeerConnectionError
from .config import DEFAULT_FETCH_TIMEOUT

if TYPE_CHECKING:
    from .peer_node import PeerNode

logger = logging.getLogger(__name__)

class PeerLink:
    """A bidirectional connection between two running nodes.

    Either side can fetch blocks from the other side's store over the link.
    A link stays open until one of the nodes closes it or stops.
    """
    __nodes:tuple[PeerNode, PeerNode]
    __open:bool

    def __init__(self, node_a:PeerNode, node_b:PeerNode, fetch_timeout:float=DEFAULT_FETCH_TIMEOUT):
        self.__nodes = (node_a, node_b)
        self.__open = True
        self.fetch_timeout = fetch_timeout

    @property
    def nodes(self) -> tuple[PeerNode, PeerNode]:
        return self.__nodes

    @property
    def is_open(self) -> bool:
        return self.__open

    @property
    def status(self) -> str:
        return "open" if self.__open else "closed"

    def remote(self, node:PeerNode) -> PeerNode:
        """Returns the node on the other end of the link, as seen from 'node'."""
        node_a, node_b = self.__nodes
        if node is node_a:
            return node_b
        elif node is node_b:
            return node_a
        raise ValueError(f"Node {node.peer_id} is not an endpoint of this link.")

    def close(self) -> None:
        if not self.__open:
            return
        self.__open = False
        for node in self.__nodes:
            node._detach_link(self)
        logger.debug(f"Closed link {self}")

    async def fetch(self, from_node:PeerNode, cid:ContentId) -> bytes:
        """Gets a block from the store of 'from_node', which must be one of the endpoints of the link.

        Raises NotFound if the remote does not have the block, and LinkError if the link is closed,
        the remote is not running anymore, or the fetch does not complete within the timeout.
        """
        self.remote(from_node)
        if not self.__open:
            raise LinkError(f"Link {self} is closed.")
        try:
            data = await asyncio.wait_for(from_node._serve_block(cid), self.fetch_timeout)
        except asyncio.TimeoutError as e:
            raise LinkError(f"Fetching '{to_content_id_str(cid)}' from {from_node.peer_id} timed out after {self.fetch_timeout} seconds.") from e
        logger.debug(f"Fetched '{to_content_id_str(cid)}' ({len(data)} bytes) from {from_node.peer_id}")
        return data

    def __repr__(self) -> str:
        node_a, node_b = self.__nodes
        return f"PeerLink({node_a.peer_id} <-> {node_b.peer_id}, {self.status})"

async def connect(node_a:PeerNode, node_b:PeerNode) -> PeerLink:
    """Connects two running nodes. Connecting nodes that are already linked returns the existing link."""
    if node_a is node_b:
        raise PeerConnectionError("Cannot connect a node to itself.")
    for node in (node_a, node_b):
        if not node.is_running:
            raise PeerConnectionError(f"Cannot connect, node {node.peer_id} is {node.state.value}.")
    existing = node_a.get_link(node_b.peer_id)
    if existing is not None and existing.is_open:
        return existing
    link = PeerLink(node_a, node_b, min(node_a.config.fetch_timeout, node_b.config.fetch_timeout))
    node_a._attach_link(link)
    node_b._attach_link(link)
    logger.info(f"Connected {node_a.peer_id} to {node_b.peer_id}")
    return link
