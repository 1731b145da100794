"""Pydantic schemas for the document registration payload.

Field names are the wire names (snake_case); `model_dump(mode="json")`
yields the exact request body, nulls included.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Description(BaseModel):
    """Document description block."""

    model_config = ConfigDict(frozen=True)

    participant_inn: str | None = Field(
        default=None, description="INN of the participant submitting the document."
    )


class Product(BaseModel):
    """A single product entered into circulation by the document."""

    model_config = ConfigDict(frozen=True)

    certificate_document: str | None = Field(
        default=None, description="Type of the conformity document."
    )
    certificate_document_date: str | None = Field(
        default=None, description="Date of the conformity document."
    )
    certificate_document_number: str | None = Field(
        default=None, description="Number of the conformity document."
    )
    owner_inn: str | None = Field(default=None, description="INN of the owner.")
    producer_inn: str | None = Field(default=None, description="INN of the producer.")
    production_date: str | None = Field(
        default=None, description="Production date (YYYY-MM-DD)."
    )
    tnved_code: str | None = Field(
        default=None, description="Commodity code (TN VED EAEU)."
    )
    uit_code: str | None = Field(
        default=None, description="Unique identification code of the item."
    )
    uitu_code: str | None = Field(
        default=None, description="Unique identification code of the transport package."
    )


class Document(BaseModel):
    """Document introducing goods into circulation.

    Immutable after construction. Every field may be omitted; the API
    decides which ones it requires for a given `doc_type`.
    """

    model_config = ConfigDict(frozen=True)

    description: Description | None = Field(
        default=None, description="Description block with the participant INN."
    )
    doc_id: str | None = Field(default=None, description="Document identifier.")
    doc_status: str | None = Field(default=None, description="Document status.")
    doc_type: str | None = Field(
        default=None, description="Document type (e.g. 'LP_INTRODUCE_GOODS')."
    )
    import_request: bool = Field(
        default=False, description="True when the goods are imported."
    )
    owner_inn: str | None = Field(default=None, description="INN of the owner.")
    participant_inn: str | None = Field(
        default=None, description="INN of the participant."
    )
    producer_inn: str | None = Field(default=None, description="INN of the producer.")
    production_date: str | None = Field(
        default=None, description="Production date (YYYY-MM-DD)."
    )
    production_type: str | None = Field(default=None, description="Production type.")
    products: list[Product] = Field(
        default_factory=list, description="Products covered by the document."
    )
    reg_date: str | None = Field(default=None, description="Registration date.")
    reg_number: str | None = Field(default=None, description="Registration number.")

    def to_payload(self) -> dict:
        """Return the JSON-ready request body."""
        return self.model_dump(mode="json")
