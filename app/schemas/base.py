"""Shared schema configuration"""

from pydantic import BaseModel
from typing import Union

# Row ids come back as ints (identity columns) or strings (uuid columns)
RecordId = Union[int, str]

class BaseSchema(BaseModel):
    """Base schema with common configuration"""

    model_config = {
        "from_attributes": True,
        "populate_by_name": True,
    }

def same_id(left, right) -> bool:
    """Compare ids that may arrive as int or str"""
    if left is None or right is None:
        return False
    return str(left) == str(right)
