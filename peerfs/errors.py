
# Errors raised by the block stores, the peer nodes, and the file-system layer.
# They propagate unchanged up to the web gateway, which maps them to status codes.

class PeerFsError(Exception):
    pass

class NotFound(PeerFsError):
    """No block with the requested content id exists in any reachable store."""
    pass

class InvalidState(PeerFsError):
    """The node is not running (not started yet, or already stopped)."""
    pass

class PeerConnectionError(PeerFsError):
    """A link between two nodes could not be established."""
    pass

class LinkError(PeerFsError):
    """A link is down, the remote node went away, or a fetch timed out."""
    pass

class IntegrityError(LinkError):
    """A fetched block does not hash to the content id it was requested by."""
    pass

class ValidationError(PeerFsError):
    pass
