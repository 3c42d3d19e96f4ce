import hashlib
import json
import multicodec
import multibase
from peerfs.blocks.object_model import *

# Content ids are CIDv1 values: <version 0x01><multicodec of the block><multihash of the block bytes>.
# Their string form is the multibase 'base32' encoding, which is what the API hands out.
#
# File and directory nodes are serialized as canonical JSON (sorted keys, no whitespace)
# and addressed with the 'dag-json' codec. Raw file chunks use the 'raw' codec.

CODEC_RAW = 'raw'
CODEC_DAG_JSON = 'dag-json'
_CODECS = (CODEC_RAW, CODEC_DAG_JSON)
_HASH_FUNCTION = 'sha2-256'
_HASH_LEN = 32
_CID_VERSION = b'\x01'
_MULTIBASE_ENCODING = 'base32'
_STR_ENCODING = 'utf-8'

_MULTIHASH_PREFIX = multicodec.add_prefix(_HASH_FUNCTION, bytes([_HASH_LEN]))
_CID_PREFIXES = {codec: _CID_VERSION + multicodec.add_prefix(codec, _MULTIHASH_PREFIX) for codec in _CODECS}

def get_content_id(data:bytes | bytearray, codec:Codec=CODEC_RAW) -> ContentId:
    if codec not in _CID_PREFIXES:
        raise ValueError(f"Unsupported codec '{codec}', expected one of {_CODECS}.")
    digest = hashlib.sha256(data).digest()
    return _CID_PREFIXES[codec] + digest

def get_codec(cid:ContentId) -> Codec:
    for codec, prefix in _CID_PREFIXES.items():
        if cid.startswith(prefix) and len(cid) == len(prefix) + _HASH_LEN:
            return codec
    raise ValueError(f"Not a supported content id: '{bytes(cid).hex()}'.")

def get_digest(cid:ContentId) -> bytes:
    get_codec(cid)
    return bytes(cid[-_HASH_LEN:])

def is_content_id(cid:ContentId) -> bool:
    if not isinstance(cid, (bytes, bytearray)):
        return False
    return any(cid.startswith(prefix) and len(cid) == len(prefix) + _HASH_LEN for prefix in _CID_PREFIXES.values())

def verify_content_id(cid:ContentId, data:bytes) -> bool:
    """True if the data hashes to the given content id (under the codec of that id)."""
    return is_content_id(cid) and get_content_id(data, get_codec(cid)) == cid

def to_content_id_str(cid:ContentId) -> str:
    return multibase.encode(_MULTIBASE_ENCODING, bytes(cid)).decode('ascii')

def to_content_id(cid_str:str) -> ContentId:
    cid = multibase.decode(cid_str)
    if not is_content_id(cid):
        raise ValueError(f"'{cid_str}' does not decode to a supported content id.")
    return cid

def is_content_id_str(cid_str:str) -> bool:
    if not isinstance(cid_str, str) or len(cid_str) < 2 or not cid_str.isascii():
        return False
    try:
        return is_content_id(multibase.decode(cid_str))
    except ValueError:
        return False

#============================================================
# File and directory nodes
#============================================================
def is_file(obj) -> bool:
    return isinstance(obj, File) or type(obj).__name__ == 'File'

def is_directory(obj) -> bool:
    return isinstance(obj, Directory) or type(obj).__name__ == 'Directory'

def node_to_bytes(node:Node) -> bytes:
    if is_file(node):
        return file_to_bytes(node)
    elif is_directory(node):
        return directory_to_bytes(node)
    else:
        raise TypeError("Unknown node type")

def bytes_to_node(data:bytes) -> Node:
    doc = _load_json(data)
    node_type = doc.get("Type")
    if node_type == 'file':
        return _doc_to_file(doc)
    elif node_type == 'directory':
        return _doc_to_directory(doc)
    else:
        raise TypeError(f"Unknown node type '{node_type}'")

def get_node_id(node:Node) -> ContentId:
    return get_content_id(node_to_bytes(node), CODEC_DAG_JSON)

def _dump_json(doc:dict) -> bytes:
    return json.dumps(doc, sort_keys=True, separators=(',', ':'), ensure_ascii=False).encode(_STR_ENCODING)

def _load_json(data:bytes) -> dict:
    try:
        doc = json.loads(bytes(data).decode(_STR_ENCODING))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise TypeError("Node is not valid dag-json") from e
    if not isinstance(doc, dict):
        raise TypeError("Node must be a json object")
    return doc

def _link(cid:ContentId) -> dict:
    return {"/": to_content_id_str(cid)}

def _unlink(link:dict) -> ContentId:
    return to_content_id(link["/"])

def file_to_bytes(node:File) -> bytes:
    if node.size != sum(chunk.size for chunk in node.chunks):
        raise ValueError(f"File size {node.size} does not match the size of its chunks.")
    return _dump_json({
        "Type": "file",
        "Size": node.size,
        "Links": [{"Hash": _link(chunk.cid), "Size": chunk.size} for chunk in node.chunks],
    })

def bytes_to_file(data:bytes) -> File:
    doc = _load_json(data)
    if doc.get("Type") != 'file':
        raise TypeError(f"Expected file but got {doc.get('Type')}")
    return _doc_to_file(doc)

def _doc_to_file(doc:dict) -> File:
    chunks = [Chunk(_unlink(link["Hash"]), int(link["Size"])) for link in doc.get("Links", [])]
    return File(int(doc["Size"]), chunks)

def directory_to_bytes(node:Directory) -> bytes:
    # entries are sorted by name, so equal entry sets always serialize to the same bytes
    return _dump_json({
        "Type": "directory",
        "Links": [{"Name": name, "Hash": _link(node.entries[name])} for name in sorted(node.entries)],
    })

def bytes_to_directory(data:bytes) -> Directory:
    doc = _load_json(data)
    if doc.get("Type") != 'directory':
        raise TypeError(f"Expected directory but got {doc.get('Type')}")
    return _doc_to_directory(doc)

def _doc_to_directory(doc:dict) -> Directory:
    return Directory({link["Name"]: _unlink(link["Hash"]) for link in doc.get("Links", [])})
