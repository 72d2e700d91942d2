"""
Copyright (c) 2025 Eric C. Mumford (@heymumford)
This file is part of IMPORTORDER, licensed under the MIT License.
See LICENSE file for details.
"""

"""
Import block location for pretty-formatted source text.

Formatted code keeps all import lines together, one per line, with nothing but
blank group separators between them, and no line of a multi-line comment before
the block starts with the import keyword. That lets the block be found with plain
string searches instead of parsing the source language.
"""

from dataclasses import dataclass

from importorder.errors import MalformedImportBlock
from importorder.order_spec import JAVA_SYNTAX, ImportSyntax

LINE_SEP = "\n"


@dataclass(frozen=True)
class ImportLine:
    """
    A single import declaration extracted from the import block.

    Attributes:
        text: Raw line text, including its statement terminator
        comparison_key: Line text with the trailing terminator removed, used for sorting
        qualified_name: Text after the import keyword without terminator; keeps the
            privileged marker, so prefixes match privileged lines only through it
        is_privileged: Whether the line is a privileged (static) import
    """

    text: str
    comparison_key: str
    qualified_name: str
    is_privileged: bool

    @classmethod
    def parse(cls, text: str, syntax: ImportSyntax = JAVA_SYNTAX) -> "ImportLine":
        comparison_key = text.removesuffix(syntax.terminator)
        return cls(
            text=text,
            comparison_key=comparison_key,
            qualified_name=comparison_key[len(syntax.keyword) :],
            is_privileged=text.startswith(syntax.privileged_prefix),
        )


@dataclass(frozen=True)
class ImportBlock:
    """
    Source text split around its import block.

    Attributes:
        before: Text preceding the first import line (empty if the block starts the text)
        raw: The block exactly as found, separators included
        lines: Import lines in encounter order
        after: Text from the line break ending the last import line onwards
    """

    before: str
    raw: str
    lines: tuple[ImportLine, ...]
    after: str

    @property
    def original_text(self) -> str:
        return self.before + self.raw + self.after


def locate_import_block(text: str, syntax: ImportSyntax = JAVA_SYNTAX) -> ImportBlock | None:
    """
    Find the contiguous import block of pretty-formatted text.

    Args:
    ----
        text: The formatted source text
        syntax: Import markers of the source language

    Returns:
    -------
        The located ImportBlock, or None if the text has no import line

    Raises:
    ------
        MalformedImportBlock: If the last import line is not terminated by a line
            break, or a non-import line sits inside the block

    """
    keyword = syntax.keyword
    line_marker = LINE_SEP + keyword

    if text.startswith(keyword):
        start = 0
    else:
        found = text.find(line_marker)
        if found == -1:
            return None
        # Skip the line break, it belongs to the text before the block
        start = found + len(LINE_SEP)

    last = text.rfind(line_marker)
    last_line_start = start if last == -1 else last + len(LINE_SEP)

    end = text.find(LINE_SEP, last_line_start)
    if end == -1:
        raise MalformedImportBlock(
            f"Import line at offset {last_line_start} is not terminated by a line break",
        )

    before = text[:start]
    raw = text[start:end]
    first_line_number = before.count(LINE_SEP) + 1

    lines = []
    for offset, raw_line in enumerate(raw.split(LINE_SEP)):
        if not raw_line.strip():
            continue
        if not raw_line.startswith(keyword):
            raise MalformedImportBlock(
                f"Line {first_line_number + offset} inside the import block is not an import: "
                f"{raw_line.strip()!r}",
            )
        lines.append(ImportLine.parse(raw_line, syntax))

    return ImportBlock(before=before, raw=raw, lines=tuple(lines), after=text[end:])
