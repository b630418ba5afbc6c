"""
Response helpers shared by the routers.
"""

from typing import Any, Dict, Optional, Type
from fastapi import Response
from pydantic import BaseModel
from bayhomes.schemas.common import MutationResponse

TOTAL_COUNT_HEADER = "x-total-count"


def set_total_count(response: Response, total: int) -> None:
    """Expose the unpaginated match count to pagination UIs."""
    response.headers[TOTAL_COUNT_HEADER] = str(total)
    response.headers["Access-Control-Expose-Headers"] = TOTAL_COUNT_HEADER


def mutation_response(
    message: str,
    schema: Optional[Type[BaseModel]] = None,
    document: Optional[Dict[str, Any]] = None
) -> MutationResponse:
    """
    Build the ``{success, message, data}`` envelope.

    Args:
        message: Human-readable outcome
        schema: Response schema used to shape ``document``
        document: Output of a model's ``to_dict()``

    Returns:
        MutationResponse with ``data`` serialized by UI field names
    """
    data = None
    if schema is not None and document is not None:
        data = schema.model_validate(document).model_dump(by_alias=True, mode="json")
    return MutationResponse(success=True, message=message, data=data)
