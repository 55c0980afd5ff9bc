from pathlib import Path
from typing import Protocol

from cec_test_server.models import ContentItem, DigitalAsset, VariationSet


class ContentSource(Protocol):
    def type_of(self, item_id: str) -> str: ...

    def load_item(self, item_type: str, item_id: str) -> ContentItem | None: ...

    def list_items(self, item_type: str) -> list[ContentItem] | None: ...

    def find_by_slug(self, slug: str) -> list[ContentItem]: ...

    async def scan_item_files(self) -> list[Path]: ...

    async def find_item_by_slug(self, slug: str) -> ContentItem | None: ...

    def variation_set(self, item_id: str) -> VariationSet | None: ...

    def variation_set_files(self) -> list[Path]: ...

    def read_variation_file(self, path: Path) -> VariationSet: ...

    def digital_asset(self, asset_id: str) -> DigitalAsset | None: ...
