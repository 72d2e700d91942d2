"""
Copyright (c) 2025 Eric C. Mumford (@heymumford)
This file is part of IMPORTORDER, licensed under the MIT License.
See LICENSE file for details.
"""

"""
Import block sorting.

Splits the located import block into the configured groups, sorts every group
and reassembles the block in configured order with a single blank line between
non-empty groups. Everything outside the block is returned untouched.
"""

import logging

from importorder.import_block import LINE_SEP, ImportLine, locate_import_block
from importorder.order_spec import GroupKey, OrderSpec

logger = logging.getLogger("importorder.imports_sorter")

Groups = dict[GroupKey, list[ImportLine]]

# The fallback spec routes every line into this one group
FALLBACK_GROUP = GroupKey.other()


def classify(lines: tuple[ImportLine, ...] | list[ImportLine], spec: OrderSpec) -> Groups:
    """
    Assign every import line to exactly one group of the spec.

    Prefixes are tried most specific first. Lines no prefix matches go to the
    privileged or the other bucket, both guaranteed present by compilation.

    Args:
        lines: Import lines in encounter order
        spec: The compiled order spec

    Returns:
        Mapping of every configured group to its lines, in encounter order
    """
    if spec.is_fallback:
        return {FALLBACK_GROUP: list(lines)}

    groups: Groups = {key: [] for key in spec.groups}
    for line in lines:
        groups[_group_for(line, spec)].append(line)
    return groups


def _group_for(line: ImportLine, spec: OrderSpec) -> GroupKey:
    for key in spec.match_list:
        if line.qualified_name.startswith(key.value):
            return key
    if line.is_privileged:
        return GroupKey.privileged()
    return GroupKey.other()


def sort_groups(groups: Groups, spec: OrderSpec) -> Groups:
    """Sort each group in place by comparison key; the fallback group keeps its order."""
    if spec.is_fallback:
        return groups
    for lines in groups.values():
        # list.sort is stable, duplicate imports keep their relative order
        lines.sort(key=lambda line: line.comparison_key)
    return groups


def assemble(groups: Groups, spec: OrderSpec) -> str:
    """
    Rebuild the import block text.

    Args:
        groups: Sorted groups
        spec: The compiled order spec

    Returns:
        Block text without leading or trailing line break
    """
    if spec.is_fallback:
        return LINE_SEP.join(line.text for line in groups.get(FALLBACK_GROUP, []))

    chunks = [
        LINE_SEP.join(line.text for line in groups[key])
        for key in spec.groups
        if groups.get(key)
    ]
    return (LINE_SEP * 2).join(chunks)


def sort_imports(formatted_code: str, spec: OrderSpec) -> str:
    """
    Sort the import lines of pretty-formatted source code.

    Args:
        formatted_code: Source code as produced by the pretty-printer
        spec: The compiled order spec

    Returns:
        The source code with its import block regrouped and sorted

    Raises:
        MalformedImportBlock: If the import block cannot be delimited
    """
    block = locate_import_block(formatted_code, spec.syntax)
    if block is None:
        return formatted_code

    groups = sort_groups(classify(block.lines, spec), spec)
    if logger.isEnabledFor(logging.DEBUG):
        sizes = {str(key): len(lines) for key, lines in groups.items() if lines}
        logger.debug(f"Classified {len(block.lines)} import lines: {sizes}")

    return block.before + assemble(groups, spec) + block.after
