from . object_model import *
from . content_store import ContentLoader, ContentStore
from . object_serialization import (CODEC_RAW, CODEC_DAG_JSON, get_content_id, get_codec, get_digest, is_content_id,
                                    is_content_id_str, to_content_id_str, to_content_id, verify_content_id,
                                    is_file, is_directory, node_to_bytes, bytes_to_node, get_node_id)
from . references import References, ref_fs_root
