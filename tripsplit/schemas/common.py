"""
Shared schema field types.
"""
from decimal import Decimal
from typing import Annotated

from pydantic import PlainSerializer

# Monetary values stay Decimal in Python and are emitted as JSON numbers
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]
