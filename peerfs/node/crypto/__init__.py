from .peer_id import PeerIdentity, create_peer_identity, extract_public_key, is_peer_id, to_did_key
