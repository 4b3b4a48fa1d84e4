"""
Success envelope shared by every endpoint: {"status": "success", "data": {...}}.
"""

from typing import Any, Dict


def success(**data: Any) -> Dict[str, Any]:
    return {"status": "success", "data": data}
