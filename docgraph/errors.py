"""Exceptions raised while turning a symbol graph into documentation."""

from docgraph.kinds import Kind


class DocGenError(Exception):
    """Base class for fatal documentation generation errors."""


class StructuralError(DocGenError):
    """A node of a kind that mandates children was handed over without them."""

    def __init__(self, kind: Kind, name: str = "") -> None:
        self.kind = kind
        self.name = name
        label = f' "{name}"' if name else ""
        super().__init__(f"Invalid {kind.name} node{label}: missing children")


class MissingSourceError(DocGenError):
    """A page-owning node carries no source location to derive its file name."""

    def __init__(self, symbol_name: str) -> None:
        self.symbol_name = symbol_name
        super().__init__(f'Source not found for page node "{symbol_name}"')


class GraphLoadError(DocGenError):
    """The input document cannot be turned into a symbol graph."""
