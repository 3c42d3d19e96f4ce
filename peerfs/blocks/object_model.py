from typing import NamedTuple

# Type aliases and structures that define the object model of the block store.

ContentId = bytes # binary CIDv1: version, multicodec of the block, sha2-256 multihash of the block bytes

Codec = str # multicodec name, 'raw' or 'dag-json'

Block = NamedTuple("Block",
    [('cid', ContentId),
     ('data', bytes)])

# Nodes of the file-system layer. Raw data blocks are not wrapped in a node,
# a single chunk file is just a 'raw' block.
FileId = ContentId
DirectoryId = ContentId

Chunk = NamedTuple("Chunk",
    [('cid', ContentId),
     ('size', int)])

File = NamedTuple("File",
    [('size', int),
     ('chunks', list[Chunk])])

Directory = NamedTuple("Directory",
    [('entries', dict[str, ContentId])]) # a directory entry name must not contain '/'

Node = File | Directory
