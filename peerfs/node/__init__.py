from .config import NodeConfig, DEFAULT_BOOTSTRAP
from .crypto import PeerIdentity, create_peer_identity
from .network import PeerNetwork
from .peer_link import PeerLink, connect
from .peer_node import PeerNode, NodeState
