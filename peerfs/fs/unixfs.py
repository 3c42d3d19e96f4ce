from __future__ import annotations
import logging
from typing import AsyncIterator, NamedTuple
from peerfs.blocks import *
from peerfs.blocks.stores.memory import MemoryReferences
from peerfs.errors import ValidationError
from peerfs.node import PeerNode
from .path_helpers import tree_path_parts, file_path_parts, enforce_entry_name

logger = logging.getLogger(__name__)

# A small UnixFS-like file system on top of a peer node.
#
# Files are split into chunks of 'chunk_size' bytes. Every chunk is a 'raw' block.
# A file that fits into a single chunk is just that raw block, larger files get a File node
# that lists the chunks in order. Directories are Directory nodes, mapping names to content ids.
#
# Nodes are never changed in place. Linking an entry into a directory stores a new directory
# and returns its id, the old version stays valid. The current root directory of the file system
# is tracked with a reference (see 'ref_fs_root'), which is the only mutable state here.
#
# All reads go through PeerNode.resolve, so they work for content that only a linked peer has.

FsStat = NamedTuple("FsStat",
    [('cid', ContentId),
     ('type', str), # 'file' or 'directory'
     ('size', int), # file size in bytes, number of entries for directories
     ('blocks', int)])

class UnixFs:
    node:PeerNode
    references:References
    chunk_size:int

    def __init__(self, node:PeerNode, references:References|None=None, chunk_size:int|None=None):
        if not isinstance(node, PeerNode):
            raise TypeError('node must be a PeerNode')
        self.node = node
        self.references = references if references is not None else MemoryReferences()
        self.chunk_size = chunk_size if chunk_size is not None else node.config.chunk_size
        if self.chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, but was '{self.chunk_size}'.")

    #==========================================
    # Root
    #==========================================
    async def root(self) -> DirectoryId:
        """The id of the current root directory, an empty directory if nothing was added yet."""
        root_id = await self.references.get(ref_fs_root())
        if root_id is None:
            root_id = await self._put_node(Directory({}))
            await self.references.set(ref_fs_root(), root_id)
        return root_id

    async def _set_root(self, root_id:DirectoryId) -> None:
        await self.references.set(ref_fs_root(), root_id)
        logger.debug(f"New root '{to_content_id_str(root_id)}'")

    #==========================================
    # Write APIs
    #==========================================
    async def add_bytes(self, data:bytes) -> FileId:
        """Stores the data as a file and returns the file id. Does not change the root."""
        if not isinstance(data, (bytes, bytearray)):
            raise ValidationError(f"File data must be bytes, but was '{type(data)}'.")
        if len(data) <= self.chunk_size:
            return await self.node.publish(bytes(data), CODEC_RAW)
        chunks = []
        for offset in range(0, len(data), self.chunk_size):
            chunk_data = bytes(data[offset:offset+self.chunk_size])
            chunk_id = await self.node.publish(chunk_data, CODEC_RAW)
            chunks.append(Chunk(chunk_id, len(chunk_data)))
        return await self._put_node(File(len(data), chunks))

    async def add_file(self, path:str|None, data:bytes) -> FileId:
        """Stores the data as a file. If a path is given, the file is also linked into the root at that path,
        creating missing parent directories."""
        file_id = await self.add_bytes(data)
        if path is not None:
            parts = file_path_parts(path)
            root_id = await self._set_path(await self.root(), parts, file_id)
            await self._set_root(root_id)
        logger.info(f"Added file '{path}' as '{to_content_id_str(file_id)}' ({len(data)} bytes)")
        return file_id

    async def add_directory(self, name:str, exist_ok:bool=True) -> DirectoryId:
        """Creates an empty directory at 'name' (relative to the root) and returns its id.

        If a directory already exists there and 'exist_ok' is set, the existing directory is returned unchanged.
        """
        parts = tree_path_parts(name)
        if len(parts) == 0:
            raise ValidationError("Directory name cannot be empty.")
        root_id = await self.root()
        existing = await self._find_path(root_id, parts)
        if existing is not None:
            if not await self.is_directory(existing):
                raise ValidationError(f"'{name}' already exists and is not a directory.")
            if exist_ok:
                return existing
            raise ValidationError(f"Directory '{name}' already exists. To reuse an existing directory, set exist_ok=True.")
        dir_id = await self._put_node(Directory({}))
        await self._set_root(await self._set_path(root_id, parts, dir_id))
        return dir_id

    async def link(self, dir_id:DirectoryId, name:str, child_id:ContentId) -> DirectoryId:
        """Returns the id of a new directory that has all entries of 'dir_id' plus 'name' -> 'child_id'.
        An existing entry with the same name is replaced."""
        enforce_entry_name(name)
        if not is_content_id(child_id):
            raise ValidationError("child_id must be a content id")
        directory = await self.load_directory(dir_id)
        entries = dict(directory.entries)
        entries[name] = child_id
        return await self._put_node(Directory(entries))

    async def write(self, path:str, cid:ContentId) -> DirectoryId:
        """Links an existing file or directory into the root at 'path' and returns the new root id."""
        root_id = await self._set_path(await self.root(), file_path_parts(path), cid)
        await self._set_root(root_id)
        return root_id

    async def _set_path(self, dir_id:DirectoryId, parts:list[str], cid:ContentId) -> DirectoryId:
        if len(parts) == 1:
            return await self.link(dir_id, parts[0], cid)
        directory = await self.load_directory(dir_id)
        sub_id = directory.entries.get(parts[0])
        if sub_id is None:
            sub_id = await self._put_node(Directory({}))
        new_sub_id = await self._set_path(sub_id, parts[1:], cid)
        return await self.link(dir_id, parts[0], new_sub_id)

    async def _put_node(self, node:Node) -> ContentId:
        return await self.node.publish(node_to_bytes(node), CODEC_DAG_JSON)

    #==========================================
    # Read APIs
    #==========================================
    async def cat(self, cid:ContentId) -> AsyncIterator[bytes]:
        """Yields the chunks of a file in order. Every chunk is resolved only when it is reached.

        Calling cat again starts over from the first chunk.
        """
        if _codec(cid) == CODEC_RAW:
            yield await self.node.resolve(cid)
            return
        node = await self.load_node(cid)
        if is_directory(node):
            raise ValidationError(f"'{to_content_id_str(cid)}' is a directory.")
        for chunk in node.chunks:
            yield await self.node.resolve(chunk.cid)

    async def read(self, cid:ContentId) -> bytes:
        """Returns the complete content of a file."""
        return b"".join([chunk async for chunk in self.cat(cid)])

    async def ls(self, dir_id:DirectoryId|None=None) -> dict[str, ContentId]:
        """Returns the entries of a directory, of the root if no id is given."""
        if dir_id is None:
            dir_id = await self.root()
        directory = await self.load_directory(dir_id)
        return {name: directory.entries[name] for name in sorted(directory.entries)}

    async def stat(self, cid:ContentId) -> FsStat:
        if _codec(cid) == CODEC_RAW:
            data = await self.node.resolve(cid)
            return FsStat(cid, 'file', len(data), 1)
        node = await self.load_node(cid)
        if is_directory(node):
            return FsStat(cid, 'directory', len(node.entries), 1)
        return FsStat(cid, 'file', node.size, len(node.chunks) + 1)

    async def get_path(self, path:str, root_id:DirectoryId|None=None) -> ContentId|None:
        """Returns the id at the path, or None if nothing is there."""
        if root_id is None:
            root_id = await self.root()
        return await self._find_path(root_id, tree_path_parts(path))

    async def _find_path(self, dir_id:DirectoryId, parts:list[str]) -> ContentId|None:
        cid = dir_id
        for part in parts:
            if not await self.is_directory(cid):
                return None
            directory = await self.load_directory(cid)
            cid = directory.entries.get(part)
            if cid is None:
                return None
        return cid

    async def is_directory(self, cid:ContentId) -> bool:
        if _codec(cid) != CODEC_DAG_JSON:
            return False
        return is_directory(await self.load_node(cid))

    async def load_node(self, cid:ContentId) -> Node:
        if _codec(cid) != CODEC_DAG_JSON:
            raise ValidationError(f"'{to_content_id_str(cid)}' is a raw block, not a file or directory node.")
        data = await self.node.resolve(cid)
        try:
            return bytes_to_node(data)
        except (TypeError, KeyError, ValueError) as e:
            raise ValidationError(f"'{to_content_id_str(cid)}' is not a valid file system node.") from e

    async def load_directory(self, dir_id:DirectoryId) -> Directory:
        if not is_content_id(dir_id):
            raise ValidationError("dir_id must be a content id")
        node = await self.load_node(dir_id)
        if not is_directory(node):
            raise ValidationError(f"'{to_content_id_str(dir_id)}' is not a directory.")
        return node

def _codec(cid:ContentId) -> Codec:
    if not is_content_id(cid):
        raise ValidationError("Expected a content id")
    return get_codec(cid)
