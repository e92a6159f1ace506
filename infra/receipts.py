from __future__ import annotations

import logging
import re
from pathlib import Path

from core.exceptions import ValidationError
from core.interfaces import ReceiptStore
from core.models import generate_id
from infra.path import receipts_dir

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")
MAX_RECEIPT_BYTES = 10 * 1024 * 1024


def _safe_name(filename: str) -> str:
    name = Path(filename or "").name
    cleaned = _UNSAFE_CHARS.sub("_", name).strip("._")
    return cleaned or "receipt"


class LocalReceiptStore(ReceiptStore):
    """Receipts on the local disk under ``<data dir>/receipts/<project>/``."""

    def __init__(self, root: str | Path | None = None) -> None:
        self._root = Path(root) if root is not None else receipts_dir()
        self._root.mkdir(parents=True, exist_ok=True)

    @property
    def root(self) -> Path:
        return self._root

    def upload(self, project_id: str, filename: str, content: bytes) -> str:
        if not content:
            raise ValidationError("Receipt file is empty.", code="RECEIPT_EMPTY")
        if len(content) > MAX_RECEIPT_BYTES:
            raise ValidationError("Receipt file is larger than 10 MB.", code="RECEIPT_TOO_LARGE")
        ref = f"{project_id}/{generate_id()}_{_safe_name(filename)}"
        target = self._root / ref
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(content)
        logger.info("Stored receipt %s (%d bytes)", ref, len(content))
        return ref

    def public_url(self, receipt_ref: str) -> str:
        return self.path_for(receipt_ref).as_uri()

    def path_for(self, receipt_ref: str) -> Path:
        target = (self._root / receipt_ref).resolve()
        if self._root.resolve() not in target.parents:
            raise ValidationError("Receipt reference is outside the receipt store.", code="RECEIPT_REF_INVALID")
        return target


__all__ = ["LocalReceiptStore", "MAX_RECEIPT_BYTES"]
