from __future__ import annotations
import itertools
import logging
from typing import TYPE_CHECKING
from peerfs.errors import PeerConnectionError

if TYPE_CHECKING:
    from .peer_node import PeerNode

logger = logging.getLogger(__name__)

# An in-process network that nodes listen on. It maps listen addresses to nodes,
# which is all the transport the two-node setup needs.
#
# Addresses are multiaddr-like strings: "/memory/<name>/p2p/<peer id>".
# A node listening on "/memory/0" gets a fresh name assigned.

_MEMORY_PROTOCOL = "memory"
_P2P_PROTOCOL = "p2p"

class PeerNetwork:
    _listeners:dict[str, PeerNode]

    def __init__(self):
        self._listeners = {}
        self._names = itertools.count(1)

    def listen(self, node:PeerNode, listen_addrs:list[str]) -> list[str]:
        """Registers the node under each listen address and returns the full addresses (including the peer id).

        Either all addresses are registered or, if one of them is in use, none is.
        """
        if node.peer_id is None:
            raise PeerConnectionError("Node has no peer id, cannot listen before the identity is created.")
        names = []
        for listen_addr in listen_addrs:
            name, _ = _parse_address(listen_addr)
            if name == "0":
                name = str(next(self._names))
                while name in self._listeners or name in names:
                    name = str(next(self._names))
            if name in self._listeners or name in names:
                raise PeerConnectionError(f"Address '{listen_addr}' is already in use.")
            names.append(name)
        for name in names:
            self._listeners[name] = node
        bound = [f"/{_MEMORY_PROTOCOL}/{name}/{_P2P_PROTOCOL}/{node.peer_id}" for name in names]
        logger.debug(f"Node {node.peer_id} listening on {bound}")
        return bound

    def unlisten(self, node:PeerNode) -> None:
        for name in [name for name, n in self._listeners.items() if n is node]:
            del self._listeners[name]

    def lookup(self, address:str) -> PeerNode:
        """Returns the node listening at the address, raises PeerConnectionError if there is none."""
        name, peer_id = _parse_address(address)
        node = self._listeners.get(name)
        if node is None:
            raise PeerConnectionError(f"Nobody is listening on '{address}'.")
        if peer_id is not None and node.peer_id != peer_id:
            raise PeerConnectionError(f"Peer at '{address}' has id '{node.peer_id}', not '{peer_id}'.")
        return node

    def find_addresses(self, peer_id:str) -> list[str]:
        """Discovers the addresses a peer can be dialed at. Empty if the peer is not on the network."""
        return [f"/{_MEMORY_PROTOCOL}/{name}/{_P2P_PROTOCOL}/{peer_id}"
                for name, node in self._listeners.items() if node.peer_id == peer_id]

    def __len__(self):
        return len(set(id(node) for node in self._listeners.values()))

def _parse_address(address:str) -> tuple[str, str|None]:
    if not isinstance(address, str):
        raise PeerConnectionError(f"Address must be a string, but was '{type(address)}'.")
    parts = [part for part in address.split("/") if part != ""]
    if len(parts) not in (2, 4) or parts[0] != _MEMORY_PROTOCOL or (len(parts) == 4 and parts[2] != _P2P_PROTOCOL):
        raise PeerConnectionError(f"Unsupported address '{address}', expected '/{_MEMORY_PROTOCOL}/<name>[/{_P2P_PROTOCOL}/<peer id>]'.")
    return parts[1], parts[3] if len(parts) == 4 else None
