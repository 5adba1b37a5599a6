from __future__ import annotations

import json
from typing import Sequence

from precatorios.export.common import require_records
from precatorios.extract.schema import Precatorio


def records_to_json(records: Sequence[Precatorio]) -> bytes:
    """Records as a JSON array using the camelCase field names."""
    require_records(records)
    payload = [r.model_dump(by_alias=True) for r in records]
    return json.dumps(payload, indent=2, ensure_ascii=False).encode("utf-8")
