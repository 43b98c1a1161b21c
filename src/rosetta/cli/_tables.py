"""Rich table builders used by the CLI.

Kept separate to keep the command module smaller.
"""

from __future__ import annotations

from rich.markup import escape
from rich.table import Table

from rosetta.core.classify import get_classifier
from rosetta.reflect.members import ClassSignature


def classify_name(name: str) -> str:
    """Describe how a bare name is classified."""
    classifier = get_classifier()
    if classifier.is_primitive(name):
        return "primitive"
    if classifier.is_concrete_type(name):
        return "concrete"
    return "type variable"


def build_classification_table(names: list[str]) -> Table:
    """Build a (Name, Classification) table for `classify`."""
    table = Table(show_header=True)
    table.add_column("Name")
    table.add_column("Classification")
    for name in names:
        table.add_row(escape(name), classify_name(name))
    return table


def build_signatures_table(signatures: list[ClassSignature]) -> Table:
    """Build the class summary table for `scan --output`."""
    table = Table(show_header=True)
    table.add_column("Class", style="cyan")
    table.add_column("Kind")
    table.add_column("Type Parameters")
    table.add_column("Fields")
    table.add_column("Constructors")
    table.add_column("Methods")
    for signature in signatures:
        table.add_row(
            signature.name,
            signature.kind.value.lower(),
            ", ".join(parameter.name for parameter in signature.type_parameters),
            str(len(signature.fields)),
            str(len(signature.constructors)),
            str(len(signature.methods)),
        )
    return table
