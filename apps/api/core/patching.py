"""Explicit field-to-column mapping for partial updates."""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel


def build_assignments(patch: BaseModel, columns: Mapping[str, str]) -> dict[str, Any]:
    """Map the fields a client explicitly set to column assignments.

    Only fields present in ``columns`` can ever produce an assignment, and the
    result follows the order of ``columns`` so the generated UPDATE is stable.
    """
    provided = patch.model_dump(exclude_unset=True)
    return {column: provided[field] for field, column in columns.items() if field in provided}
