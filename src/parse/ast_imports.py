"""AST-based import scanning for Python sources."""

from __future__ import annotations

import ast

ImportTable = dict[str, list[tuple[int, str, str, int]]]


def _process_import_node(node: ast.Import, imports: ImportTable) -> None:
    """Process a standard import node (import x)."""
    for name in node.names:
        imports["import"].append((node.lineno, name.name, name.asname or "", 0))


def _get_import_type(name: ast.alias, is_relative: bool) -> str:
    """Determine the import type based on name and relativity."""
    if name.name == "*":
        return "import_star"
    return "relative_import" if is_relative else "import_from"


def _process_import_from_node(node: ast.ImportFrom, imports: ImportTable) -> None:
    """Process a from-import node (from x import y)."""
    module = node.module or ""
    is_relative = node.level > 0

    for name in node.names:
        import_type = _get_import_type(name, is_relative)
        imports[import_type].append((node.lineno, module, name.name, node.level))


def extract_imports(text: str) -> ImportTable:
    """Extract import statements from Python source text.

    Returns:
        Dictionary with import types as keys and lists of
        (line_number, module, name, level) tuples as values.
        Level is 0 for absolute imports, 1+ for relative imports.
    """
    imports: ImportTable = {
        "import": [],
        "import_from": [],
        "import_star": [],
        "relative_import": [],
    }

    try:
        tree = ast.parse(text)
    except (SyntaxError, ValueError):
        # Unparseable text: report no imports rather than failing the scan.
        return imports

    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            _process_import_node(node, imports)
        elif isinstance(node, ast.ImportFrom):
            _process_import_from_node(node, imports)

    return imports


def _join(prefix: str, *parts: str) -> str:
    return prefix + ".".join(part for part in parts if part)


class PythonImportScanner:
    """Best-effort reference discovery for Python modules.

    References are dotted module names. Relative imports keep their leading
    dots (``from ..x import y`` yields ``..x`` and ``..x.y``) so the resolver
    can anchor them on the importing module. ``from a import b`` yields both
    ``a`` and ``a.b`` since ``b`` may be a submodule or a plain attribute.
    """

    language = "python"

    def scan(self, text: str) -> frozenset[str]:
        imports = extract_imports(text)
        references: set[str] = set()

        for _line, module, _alias, _level in imports["import"]:
            references.add(module)

        for _line, module, name, _level in imports["import_from"]:
            references.add(module)
            references.add(_join("", module, name))

        for _line, module, _name, level in imports["import_star"]:
            prefix = "." * level
            if module or level:
                references.add(_join(prefix, module) if module else prefix)

        for _line, module, name, level in imports["relative_import"]:
            prefix = "." * level
            if module:
                references.add(_join(prefix, module))
            references.add(_join(prefix, module, name))

        return frozenset(ref for ref in references if ref)


def resolve_relative_import(
    importing_module: str,
    relative_module: str,
    level: int,
) -> str:
    """Resolve a relative import to an absolute module name.

    Examples:
        >>> resolve_relative_import("pkg.sub.mod", "foo", 1)
        'pkg.sub.foo'
        >>> resolve_relative_import("pkg.sub.mod", "", 1)
        'pkg.sub'
        >>> resolve_relative_import("pkg.sub.mod", "bar", 2)
        'pkg.bar'
    """
    parts = importing_module.split(".")

    if level > len(parts):
        return relative_module or importing_module

    base_parts = parts[: len(parts) - level]

    if relative_module:
        return ".".join([*base_parts, relative_module])
    if base_parts:
        return ".".join(base_parts)
    return importing_module


__all__ = ["PythonImportScanner", "extract_imports", "resolve_relative_import"]
