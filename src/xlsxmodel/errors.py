"""Exceptions raised by the document model."""

from __future__ import annotations


class XlsxModelError(Exception):
    """Base exception for document model errors."""

    pass


class ReferenceParseError(XlsxModelError, ValueError):
    """Raised when a cell or range reference cannot be parsed."""

    def __init__(self, ref: str) -> None:
        self.ref = ref
        super().__init__(f"Invalid cell reference: {ref!r}")


class UnrecognizedTokenError(XlsxModelError, ValueError):
    """Raised when an attribute token does not belong to its enumeration."""

    def __init__(self, enum_name: str, token: str) -> None:
        self.enum_name = enum_name
        self.token = token
        super().__init__(f"Unrecognized {enum_name} token: {token!r}")


class InvalidLinkShapeError(XlsxModelError, TypeError):
    """Raised when a hyperlink is neither a target string nor a HyperlinkInfo."""

    def __init__(self, link: object) -> None:
        self.link = link
        super().__init__(
            f"Unsupported type of hyperlink ({type(link).__name__}), only str or HyperlinkInfo is allowed"
        )


class HyperlinkTargetError(XlsxModelError, ValueError):
    """Raised when a hyperlink target is empty or longer than the format allows."""

    def __init__(self, target: str, reason: str) -> None:
        self.target = target
        self.reason = reason
        super().__init__(f"Invalid hyperlink target {target!r}: {reason}")


class OverlapConflictError(XlsxModelError):
    """Raised when a hyperlink would intersect a different existing hyperlink."""

    def __init__(self, existing: object, requested: object) -> None:
        self.existing = existing
        self.requested = requested
        super().__init__(
            f"Intersection of different hyperlinks is not allowed, {existing} intersects with {requested}"
        )


class LimitExceededError(XlsxModelError):
    """Raised when a sheet already holds the maximum number of hyperlinks."""

    def __init__(self, limit: int) -> None:
        self.limit = limit
        super().__init__(f"Exceeds Excel limit ({limit}) for total number of hyperlinks per worksheet")


class MissingRequiredFieldError(XlsxModelError):
    """Raised when a conditional rule is serialized before its mandatory fields are set."""

    def __init__(self, variant: str, field_name: str) -> None:
        self.variant = variant
        self.field_name = field_name
        super().__init__(f"Conditional rule '{variant}' requires '{field_name}'")


class UnknownStyleCategoryError(XlsxModelError, KeyError):
    """Raised when a named style category has no canonical definition."""

    def __init__(self, category: str) -> None:
        self.category = category
        super().__init__(f"Unknown named style category: {category!r}")

    def __str__(self) -> str:
        return str(self.args[0])


class InvalidRelationshipError(XlsxModelError, ValueError):
    """Raised when a loaded ``<Relationship>`` lacks its ``Id`` or ``Target``."""

    def __init__(self, part_path: str, raw_xml: str) -> None:
        self.part_path = part_path
        self.raw_xml = raw_xml
        super().__init__(f"Relationship without Id or Target in {part_path}: {raw_xml}")
