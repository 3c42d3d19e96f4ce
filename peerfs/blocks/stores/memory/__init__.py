from .memory_content_store import MemoryContentStore
from .memory_references import MemoryReferences
