from dataclasses import dataclass, field

# Both nodes of the gateway are created from the same NodeConfig.

# The public libp2p bootstrap peers. They are part of the node configuration, but the
# two-node flow never dials them, the nodes only ever connect to each other.
DEFAULT_BOOTSTRAP = [
    "/dnsaddr/bootstrap.libp2p.io/p2p/QmNnooDu7bfjPFoTZYxMNLWUQJyrVwtbZg5gBMjTezGAJN",
    "/dnsaddr/bootstrap.libp2p.io/p2p/QmQCU2EcMqAqQPR2i9bChDtGNJchTbq5TbXJJ16u19uLTa",
    "/dnsaddr/bootstrap.libp2p.io/p2p/QmbLHAnMoJPWSCR5Zhtx6BHJX9KiKNN6tpvbUcqanj75Nb",
    "/dnsaddr/bootstrap.libp2p.io/p2p/QmcZf59bWwK5XFi76CZX8cbJ4BhTzzA3gU1ZjYZcYW3dwt",
]

# "/memory/0" asks the network for a fresh listen name, like listening on tcp port 0
DEFAULT_LISTEN = ["/memory/0"]
DEFAULT_FETCH_TIMEOUT = 10.0
DEFAULT_CHUNK_SIZE = 262144

@dataclass
class NodeConfig:
    listen:list[str] = field(default_factory=lambda: list(DEFAULT_LISTEN))
    bootstrap:list[str] = field(default_factory=lambda: list(DEFAULT_BOOTSTRAP))
    fetch_timeout:float = DEFAULT_FETCH_TIMEOUT
    chunk_size:int = DEFAULT_CHUNK_SIZE

    def __post_init__(self):
        if self.fetch_timeout is None or self.fetch_timeout <= 0:
            raise ValueError(f"fetch_timeout must be positive, but was '{self.fetch_timeout}'.")
        if self.chunk_size is None or self.chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, but was '{self.chunk_size}'.")
        if len(self.listen) == 0:
            raise ValueError("At least one listen address is needed.")
