"""Dialogue document Pydantic schemas - the persisted record format."""

from typing import Annotated, Any

from pydantic import BaseModel, Field, TypeAdapter

START_NODE = "start"


class Position(BaseModel):
    """Last known layout coordinates of a node in the editor."""
    x: int | float
    y: int | float


class Choice(BaseModel):
    """An outgoing option on a dialogue node.

    ``text`` and ``next`` may be missing in stored data; such choices are
    kept in the document but never turned into edges.
    """
    speaker: str | None = ""
    text: str | None = None
    next: str | None = None

    model_config = {"extra": "allow"}


# Entries that don't parse as a Choice (null, wrong field types) are kept
# as raw JSON so they are written back untouched.
ChoiceEntry = Annotated[Choice | Any, Field(union_mode="left_to_right")]


class DialogueNode(BaseModel):
    """One entry of the dialogue document.

    Unknown fields are allowed so extension data written by other tools
    survives a load/save cycle.
    """
    speaker: str | None = ""
    text: str | None = None
    # None = no choices; a non-list value is kept as-is and treated as empty
    choices: Annotated[list[ChoiceEntry] | Any, Field(union_mode="left_to_right")] = None
    position: Position | None = None  # None = computed on build

    model_config = {"extra": "allow"}

    def parsed_choices(self) -> list[tuple[int, Choice]]:
        """Well-formed choices with their index in the stored list."""
        if not isinstance(self.choices, list):
            return []
        return [(i, c) for i, c in enumerate(self.choices) if isinstance(c, Choice)]


def choice_target(entry: Any) -> Any:
    """The ``next`` of a choice entry, parsed or raw."""
    if isinstance(entry, Choice):
        return entry.next
    if isinstance(entry, dict):
        return entry.get("next")
    return None


# node id -> record
Document = dict[str, DialogueNode]

document_adapter = TypeAdapter(Document)


def parse_document(raw: object) -> Document:
    """Validate already-decoded JSON into a Document."""
    return document_adapter.validate_python(raw)


def dump_document(document: Document) -> dict:
    """Convert a Document to plain JSON-ready data.

    Fields that were never set on a record (e.g. ``position`` on a node the
    editor never laid out) are left out, so the file keeps its shape.
    """
    return {
        node_id: record.model_dump(exclude_unset=True)
        for node_id, record in document.items()
    }
