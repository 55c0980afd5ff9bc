from cec_test_server.store.content_set import ContentSet
from cec_test_server.store.helpers import (
    CONTENT_ITEMS_DIR,
    METADATA_FILE,
    VARIATION_SETS_DIR,
    read_json,
)
from cec_test_server.store.source_tree import SourceTree, TemplateInfo

__all__ = [
    "CONTENT_ITEMS_DIR",
    "METADATA_FILE",
    "VARIATION_SETS_DIR",
    "ContentSet",
    "SourceTree",
    "TemplateInfo",
    "read_json",
]
