"""Text and Rich rendering of an analyzed dependency tree."""

from __future__ import annotations

from rich.text import Text
from rich.tree import Tree

from deps_size_analyzer.models import AnalysisNode

INDENT = "  "


def sorted_children(node: AnalysisNode) -> list[AnalysisNode]:
    """Children ordered by descending total size, then by coordinate."""
    return sorted(node.children, key=lambda child: (-child.total_size, child.dependency.full_id))


def _report_lines(node: AnalysisNode, depth: int) -> list[str]:
    lines = [f"{INDENT * depth}{node.dependency.full_id} ({node.size})"]
    for child in sorted_children(node):
        lines.extend(_report_lines(child, depth + 1))
    return lines


def format_report(node: AnalysisNode) -> str:
    """Render the tree as indented text followed by the total size line.

    Example:
        g:a:1.0 (100)
          g:b:1.0 (50)
        Total size: 0 Kb (150)
    """
    lines = _report_lines(node, 0)
    lines.append(f"Total size: {node.total_size // 1024} Kb ({node.total_size})")
    return "\n".join(lines)


def _label(node: AnalysisNode, style: str = "") -> Text:
    # Plain Text: as markup, the ":a:" of "g:a:1" is an emoji code.
    label = Text(node.dependency.full_id, style=style)
    label.append(f" ({node.size} bytes)", style="dim")
    if node.children:
        label.append(f" total {node.total_size // 1024} Kb", style="cyan")
    return label


def build_size_tree(node: AnalysisNode) -> Tree:
    """Build a Rich Tree of the analysis result.

    Args:
        node: Root of the analyzed dependency tree.

    Returns:
        A Rich Tree object for rendering.
    """

    def add(branch: Tree, current: AnalysisNode) -> None:
        for child in sorted_children(current):
            add(branch.add(_label(child)), child)

    root = Tree(_label(node, style="bold"))
    if not node.children:
        root.add("[dim]No runtime dependencies found[/dim]")
    add(root, node)
    return root
