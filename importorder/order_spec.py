"""
Copyright (c) 2025 Eric C. Mumford (@heymumford)
This file is part of IMPORTORDER, licensed under the MIT License.
See LICENSE file for details.
"""

"""
Import order policy compilation.

This module turns the user-supplied ordered list of group descriptors into an
immutable OrderSpec. A descriptor is either a package prefix (e.g. "java"), the
empty string for the catch-all "other" bucket, or "#" for the bucket holding all
privileged (static) imports. The compiled spec keeps the configured order for
assembly and a most-specific-first match list for classification.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum

from importorder.errors import InvalidOrderSpec

logger = logging.getLogger("importorder.order_spec")

OTHER_DESCRIPTOR = ""
PRIVILEGED_DESCRIPTOR = "#"

# Used by the configuration layer when no import order is configured at all
DEFAULT_IMPORT_ORDER = ("java", "javax", OTHER_DESCRIPTOR, PRIVILEGED_DESCRIPTOR)


class BucketKind(str, Enum):
    """Kind of group an import line can be classified into."""

    PREFIX = "prefix"  # Lines whose qualified name starts with a configured prefix
    OTHER = "other"  # Non-privileged lines no prefix matched
    PRIVILEGED = "privileged"  # Privileged lines no prefix matched


@dataclass(frozen=True)
class GroupKey:
    """
    Identifies one configured group.

    Keys compare by kind and value, so a configured prefix can never collide with
    one of the catch-all buckets.

    Attributes:
        kind: The kind of group
        value: The package prefix for PREFIX groups, empty otherwise
    """

    kind: BucketKind
    value: str = ""

    @classmethod
    def prefix(cls, value: str) -> "GroupKey":
        return cls(BucketKind.PREFIX, value)

    @classmethod
    def other(cls) -> "GroupKey":
        return cls(BucketKind.OTHER)

    @classmethod
    def privileged(cls) -> "GroupKey":
        return cls(BucketKind.PRIVILEGED)

    @classmethod
    def from_descriptor(cls, descriptor: str) -> "GroupKey":
        """Build the key a raw descriptor string stands for."""
        if descriptor == OTHER_DESCRIPTOR:
            return cls.other()
        if descriptor == PRIVILEGED_DESCRIPTOR:
            return cls.privileged()
        return cls.prefix(descriptor)

    @property
    def descriptor(self) -> str:
        """The descriptor string this key is configured with."""
        if self.kind == BucketKind.OTHER:
            return OTHER_DESCRIPTOR
        if self.kind == BucketKind.PRIVILEGED:
            return PRIVILEGED_DESCRIPTOR
        return self.value

    def __str__(self) -> str:
        if self.kind == BucketKind.PREFIX:
            return self.value
        return f"<{self.kind.value}>"


@dataclass(frozen=True)
class ImportSyntax:
    """
    Markers of the source language's import declarations.

    Attributes:
        keyword: Text every import line starts with, including the trailing space
        privileged_marker: Text following the keyword on privileged imports
        terminator: Statement terminator ending each import line
    """

    keyword: str = "import "
    privileged_marker: str = "static "
    terminator: str = ";"

    @property
    def privileged_prefix(self) -> str:
        return self.keyword + self.privileged_marker


JAVA_SYNTAX = ImportSyntax()


@dataclass(frozen=True)
class OrderSpec:
    """
    A compiled, read-only import order policy.

    Attributes:
        groups: Group keys in configured (output) order; empty for the fallback spec
        match_list: Prefix keys, longest first, ties ordered lexicographically
        syntax: Import markers of the source language
    """

    groups: tuple[GroupKey, ...] = ()
    match_list: tuple[GroupKey, ...] = field(default=(), repr=False)
    syntax: ImportSyntax = JAVA_SYNTAX

    @property
    def is_fallback(self) -> bool:
        """True when no groups are configured and lines keep their encounter order."""
        return not self.groups

    @property
    def descriptors(self) -> list[str]:
        return [key.descriptor for key in self.groups]

    def to_import_order_file_content(self) -> str:
        """
        Serialize the spec to the content of a .importorder file.

        The format is one "<index>=<descriptor>" line per group, as read by
        IDE import-order settings. The fallback spec serializes to "0=".

        Returns
        -------
            Content for a .importorder file

        """
        if self.is_fallback:
            return "0="
        return "".join(f"{index}={key.descriptor}\n" for index, key in enumerate(self.groups))


def _build_match_list(groups: list[GroupKey]) -> tuple[GroupKey, ...]:
    prefixes = [key for key in groups if key.kind == BucketKind.PREFIX]
    # A longer prefix must be tried before any shorter prefix of it
    return tuple(sorted(prefixes, key=lambda key: (-len(key.value), key.value)))


def compile_order_spec(
    descriptors: list[str] | tuple[str, ...],
    strict: bool = False,
    syntax: ImportSyntax = JAVA_SYNTAX,
) -> OrderSpec:
    """
    Compile raw group descriptors into an OrderSpec.

    Args:
    ----
        descriptors: Ordered descriptors; "" is the other bucket, "#" the privileged bucket
        strict: Reject an empty list and a list missing either catch-all bucket
            instead of falling back or inserting the missing buckets
        syntax: Import markers of the source language

    Returns:
    -------
        The compiled OrderSpec

    Raises:
    ------
        InvalidOrderSpec: On duplicate or malformed descriptors, or on a
            violation of strict mode

    """
    descriptors = list(descriptors)

    if not descriptors:
        if strict:
            raise InvalidOrderSpec("Import order is empty but strict mode requires explicit groups")
        logger.debug("Empty import order, lines will keep their original order")
        return OrderSpec(syntax=syntax)

    seen: set[str] = set()
    for descriptor in descriptors:
        if not isinstance(descriptor, str):
            raise InvalidOrderSpec(f"Import order descriptor must be a string, got {descriptor!r}")
        if "\n" in descriptor or "\r" in descriptor:
            raise InvalidOrderSpec(f"Import order descriptor {descriptor!r} contains a line break")
        if descriptor in seen:
            raise InvalidOrderSpec(f"Duplicate import order descriptor {descriptor!r}")
        seen.add(descriptor)

    groups = [GroupKey.from_descriptor(descriptor) for descriptor in descriptors]

    for bucket in (GroupKey.other(), GroupKey.privileged()):
        if bucket in groups:
            continue
        if strict:
            raise InvalidOrderSpec(
                f"Import order must contain {bucket.descriptor!r} for the {bucket.kind.value} bucket",
            )
        logger.debug(f"Import order has no {bucket.kind.value} bucket, appending it")
        groups.append(bucket)

    return OrderSpec(groups=tuple(groups), match_list=_build_match_list(groups), syntax=syntax)


def parse_import_order_file_content(content: str) -> list[str]:
    """
    Parse the content of a .importorder file back into descriptors.

    Args:
    ----
        content: File content with "<index>=<descriptor>" lines

    Returns:
    -------
        The descriptors ordered by index

    Raises:
    ------
        InvalidOrderSpec: If a line is malformed or an index repeats

    """
    # A bare "0=" without line break is how the empty order is written
    if content == "0=":
        return []

    entries: dict[int, str] = {}
    for line_number, line in enumerate(content.splitlines(), start=1):
        if not line.strip() or line.startswith("#"):
            continue
        index, separator, descriptor = line.partition("=")
        if not separator or not index.strip().isdigit():
            raise InvalidOrderSpec(f"Malformed import order line {line_number}: {line!r}")
        position = int(index)
        if position in entries:
            raise InvalidOrderSpec(f"Duplicate import order index {position} on line {line_number}")
        entries[position] = descriptor

    return [entries[position] for position in sorted(entries)]
