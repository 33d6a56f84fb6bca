"""Listing form state for the interactive property draft session."""

from typing import Optional

from pydantic import ValidationError

from app.core.exceptions import BadRequestException
from app.geocoding.models import Candidate
from app.geocoding.suggestions import AddressSuggestionEngine, Lookup, PanelListener
from app.properties.models import PropertyCreate

FORM_FIELDS = ("title", "description", "price", "bedrooms", "bathrooms", "square_feet", "images")


class PropertyDraft:
    """
    Raw form values for a new listing.

    The address field is owned by the form but filled through the suggestion
    engine: typing only searches, while picking a suggestion (or submitting
    with free text) decides the address.
    """

    def __init__(
        self,
        lookup: Lookup,
        on_change: Optional[PanelListener] = None,
        delay: Optional[float] = None,
    ):
        self.fields = {name: "" for name in FORM_FIELDS}
        self.address = ""
        self.selected: Optional[Candidate] = None
        self.suggestions = AddressSuggestionEngine(
            lookup,
            delay=delay,
            on_change=on_change,
            on_select=self.use_candidate,
        )

    def handle_change(self, name: str, value: str) -> None:
        """Update a plain form field."""
        if name not in self.fields:
            raise BadRequestException(f"Unknown field: {name}")
        self.fields[name] = value

    def type_address(self, text: str) -> None:
        """Keystroke in the address box."""
        self.address = text
        if self.selected is not None and self.selected.label != text:
            self.selected = None
        self.suggestions.on_query_change(text)

    def use_candidate(self, candidate: Candidate) -> None:
        self.address = candidate.label
        self.selected = candidate

    def to_create(self) -> PropertyCreate:
        """Validate the draft into a listing payload."""
        data = {name: value for name, value in self.fields.items() if value != ""}
        data["address"] = self.address.strip()
        if self.selected is not None:
            data["latitude"] = self.selected.latitude
            data["longitude"] = self.selected.longitude

        try:
            return PropertyCreate(**data)
        except ValidationError as e:
            problems = ", ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
            )
            raise BadRequestException(f"Invalid listing: {problems}")

    def close(self) -> None:
        self.suggestions.close()
