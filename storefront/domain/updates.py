# storefront/domain/updates.py
from pydantic import BaseModel

from storefront.domain.errors import NoFieldsToUpdate


def changed_fields(payload: BaseModel) -> dict:
    """
    Partial update: only the fields the client actually sent, None values
    dropped. The keys are model attributes, so they map 1:1 to columns.
    Raises NoFieldsToUpdate when nothing is left.
    """
    fields = payload.model_dump(exclude_unset=True, exclude_none=True)
    if not fields:
        raise NoFieldsToUpdate()
    return fields
