import base58
import multicodec
from typing import NamedTuple
from multibase import encode
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat, PrivateFormat, NoEncryption

# Peer identities are Ed25519 key pairs.
# The peer id follows the libp2p convention: the identity multihash of the protobuf encoded public key
# (KeyType = Ed25519, Data = raw public key bytes), encoded as base58btc. These ids start with "12D3KooW".

_PROTOBUF_ED25519_PREFIX = bytes([0x08, 0x01, 0x12, 0x20]) # field 1 (KeyType) = 1, field 2 (Data) of 32 bytes
_ED25519_KEY_LEN = 32

PeerIdentity = NamedTuple("PeerIdentity",
    [('peer_id', str),
     ('public_key', bytes),
     ('private_key', bytes)])

def create_peer_identity(private_key_bytes:bytes|None=None) -> PeerIdentity:
    "Creates a new Ed25519 identity, or restores it from the 32 byte private key seed."
    if private_key_bytes is None:
        private_key = Ed25519PrivateKey.generate()
    else:
        if len(private_key_bytes) != _ED25519_KEY_LEN:
            raise ValueError(f"Expected a private key of {_ED25519_KEY_LEN} bytes but got {len(private_key_bytes)}")
        private_key = Ed25519PrivateKey.from_private_bytes(private_key_bytes)
    public_key = private_key.public_key()

    public_key_bytes = public_key.public_bytes(Encoding.Raw, PublicFormat.Raw)
    private_key_bytes = private_key.private_bytes(Encoding.Raw, PrivateFormat.Raw, NoEncryption())
    return PeerIdentity(_to_peer_id(public_key_bytes), public_key_bytes, private_key_bytes)

def _to_peer_id(public_key_bytes:bytes) -> str:
    protobuf_key = _PROTOBUF_ED25519_PREFIX + public_key_bytes
    multihash = multicodec.add_prefix('identity', bytes([len(protobuf_key)]) + protobuf_key)
    return base58.b58encode(multihash).decode('ascii')

def extract_public_key(peer_id:str) -> bytes:
    """Function to extract the raw Ed25519 public key from a peer id"""
    multihash = base58.b58decode(peer_id)
    if len(multihash) < 2 or multihash[0] != 0x00 or multicodec.get_codec(multihash) != 'identity':
        raise ValueError(f"Peer id '{peer_id}' is not an identity multihash.")
    digest = multicodec.remove_prefix(multihash)
    protobuf_key = digest[1:]
    if digest[0] != len(protobuf_key) or not protobuf_key.startswith(_PROTOBUF_ED25519_PREFIX):
        raise ValueError(f"Peer id '{peer_id}' does not contain an Ed25519 public key.")
    return protobuf_key[len(_PROTOBUF_ED25519_PREFIX):]

def is_peer_id(peer_id:str) -> bool:
    if not isinstance(peer_id, str) or len(peer_id) == 0:
        return False
    try:
        extract_public_key(peer_id)
        return True
    except ValueError:
        return False

def to_did_key(public_key_bytes:bytes) -> str:
    "The did:key form of the same public key."
    public_encoded = encode('base58btc', multicodec.add_prefix('ed25519-pub', public_key_bytes))
    return f"did:key:{public_encoded.decode('utf8')}"
