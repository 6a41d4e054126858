"""Adaptive Card element models.

Only the handful of elements the run reports use are modelled. See
https://adaptivecards.microsoft.com/designer.html for the full schema.
"""

from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field, field_serializer

from ..models import Recipient

CARD_CONTENT_TYPE = "application/vnd.microsoft.card.adaptive"


class TextBlock(BaseModel):
    """Text element."""

    type: Literal["TextBlock"] = "TextBlock"
    text: str = Field(..., description="Displayed text")
    size: Optional[str] = Field(None, description="small, default, medium, large, extraLarge")
    weight: Optional[str] = Field(None, description="lighter, default, bolder")
    color: Optional[str] = Field(None, description="default, good, accent, attention, warning")
    spacing: Optional[str] = Field(None, description="Spacing above the element")
    wrap: Optional[bool] = Field(None, description="Wrap long text")


class Container(BaseModel):
    """Styled group of elements."""

    type: Literal["Container"] = "Container"
    style: Optional[str] = Field(None, description="Container style")
    bleed: Optional[bool] = Field(None, description="Bleed through the parent padding")
    items: List["CardNode"] = Field(default_factory=list, description="Contained elements")


class Column(BaseModel):
    """Single column of a column set."""

    type: Literal["Column"] = "Column"
    width: Optional[str] = Field(None, description="auto, stretch or a weight")
    items: List["CardNode"] = Field(default_factory=list, description="Contained elements")


class ColumnSet(BaseModel):
    """Side-by-side columns."""

    type: Literal["ColumnSet"] = "ColumnSet"
    columns: List[Column] = Field(default_factory=list, description="Columns in display order")


CardNode = Annotated[
    Union[TextBlock, Container, Column, ColumnSet],
    Field(discriminator="type"),
]

Container.model_rebuild()
Column.model_rebuild()


class MentionEntity(BaseModel):
    """Mention resolved by Teams into a user ping."""

    type: Literal["mention"] = "mention"
    text: str = Field(..., description="Placeholder text used inside TextBlocks")
    mentioned: Recipient = Field(..., description="Mentioned user")

    @field_serializer("mentioned")
    def serialize_mentioned(self, mentioned: Recipient) -> Dict[str, str]:
        """Teams resolves mentions by `id`, so the identifier is sent under that key."""
        return {"id": mentioned.identifier, "name": mentioned.name}


class Card(BaseModel):
    """Top-level AdaptiveCard with Teams rendering metadata."""

    body: List[CardNode] = Field(default_factory=list, description="Card elements")
    entities: List[MentionEntity] = Field(default_factory=list, description="Mentions to resolve")
    width: str = Field("Full", description="Teams card width")
    summary: str = Field("", description="Preview text")

    def to_content(self) -> Dict[str, Any]:
        """Get the AdaptiveCard document."""
        return {
            "type": "AdaptiveCard",
            "body": [node.model_dump(exclude_none=True) for node in self.body],
            "msteams": {
                "width": self.width,
                "entities": [entity.model_dump() for entity in self.entities],
            },
        }

    def to_message(self) -> Dict[str, Any]:
        """Get the webhook message wrapping this card."""
        return {
            "type": "message",
            "summary": self.summary,
            "attachments": [
                {
                    "contentType": CARD_CONTENT_TYPE,
                    "content": self.to_content(),
                }
            ],
        }
