"""Base types shared across services: annotated scalars and the wire base model."""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Sentiment score: -1 (bearish) .. 1 (bullish)
SentimentScore = Annotated[float, Field(ge=-1, le=1)]

# Confidence: 0..100
Confidence = Annotated[float, Field(ge=0, le=100)]


class WireModel(BaseModel):
    """snake_case in Python, camelCase on the wire. Accepts both on input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
