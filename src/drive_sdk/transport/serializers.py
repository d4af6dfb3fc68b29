from __future__ import annotations
from typing import Any, Dict


def build_params(params: Dict[str, Any]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}

    for k, v in params.items():
        if v is None:
            continue

        if isinstance(v, bool):
            out[k] = "true" if v else "false"
            continue

        out[k] = v

    return out


def dump_body(body: Any) -> Any:
    """pydantic models -> wire dicts (by alias, Nones kept as explicit nulls)."""
    if hasattr(body, "model_dump"):
        return body.model_dump(mode="json", by_alias=True)
    return body
