from core.services.common.base import ServiceBase
from core.services.common.validation import require_amount, require_text

__all__ = ["ServiceBase", "require_amount", "require_text"]
