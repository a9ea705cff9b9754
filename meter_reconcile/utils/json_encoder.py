import json
from decimal import Decimal
from enum import Enum


class DecimalEncoder(json.JSONEncoder):
    def default(self, obj):
        if isinstance(obj, Decimal):
            # keep the exact rounded figure, never a float
            return str(obj)
        if isinstance(obj, Enum):
            return obj.value
        return super().default(obj)
