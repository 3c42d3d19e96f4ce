from dataclasses import dataclass, field
import os
import tomlkit
from tomlkit import TOMLDocument
from peerfs.node import NodeConfig

# Functions to work with a peerfs.toml configuration file.
# Utilizes https://github.com/sdispater/tomlkit to work with TOML data.
#
# The expected toml format is (every key is optional):
# --------------------------
# [server]
# host = "127.0.0.1"
# port = 9632
#
# [node] # applies to both nodes
# listen = ["/memory/0"]
# bootstrap = ["/dnsaddr/bootstrap.libp2p.io/p2p/QmNnooDu7bfjPFoTZYxMNLWUQJyrVwtbZg5gBMjTezGAJN"]
# fetch_timeout = 10.0
# chunk_size = 262144
# --------------------------

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 9632

_NODE_KEYS = ("listen", "bootstrap", "fetch_timeout", "chunk_size")
_SERVER_KEYS = ("host", "port")

@dataclass
class ServerConfig:
    host:str = DEFAULT_HOST
    port:int = DEFAULT_PORT
    node:NodeConfig = field(default_factory=NodeConfig)

def load_config(toml_file_path:str|None) -> ServerConfig:
    if toml_file_path is None:
        return ServerConfig()
    doc = _read_toml_file(toml_file_path)
    return loads_config(doc)

def loads_config(toml:str|TOMLDocument) -> ServerConfig:
    if(isinstance(toml, str)):
        doc = _read_toml_string(toml)
    else:
        doc = toml
    _validate_doc(doc)
    server = doc.get("server", {})
    node = doc.get("node", {})
    node_config = NodeConfig(**{key: _unwrap(node[key]) for key in _NODE_KEYS if key in node})
    return ServerConfig(
        **{key: _unwrap(server[key]) for key in _SERVER_KEYS if key in server},
        node=node_config)

def _validate_doc(doc:TOMLDocument) -> None:
    for table_name, keys in (("server", _SERVER_KEYS), ("node", _NODE_KEYS)):
        table = doc.get(table_name, None)
        if table is None:
            continue
        if not isinstance(table, dict):
            raise ValueError(f"'{table_name}' must be a table.")
        unknown = [key for key in table if key not in keys]
        if len(unknown) > 0:
            raise ValueError(f"Unknown keys in [{table_name}]: {unknown}, expected any of {list(keys)}.")

def _unwrap(value):
    # tomlkit wraps values in its own item types, turn them into plain python values
    if hasattr(value, "unwrap"):
        return value.unwrap()
    return value

def _read_toml_file(file_path) -> TOMLDocument:
    file_path = _convert_posix_to_win(file_path)
    with open(file_path, 'r') as f:
        return _read_toml_string(f.read())

def _read_toml_string(toml_string) -> TOMLDocument:
    return tomlkit.loads(toml_string)

def _convert_posix_to_win(path:str) -> str:
    if os.name == "nt" and "/" in path:
        return path.replace("/", os.sep)
    return path
