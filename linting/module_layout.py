#!/usr/bin/env python
"""Enforce the module layout rules of the `tunnel` package.

Rules:
- If a module defines __all__, it is one top-level assignment and the last statement.
- At most one top-level non-dataclass class per package module.
- No folder wraps a single substantive child (ignoring __init__.py).
"""

from __future__ import annotations

import ast
import sys
import argparse
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
DEFAULT_DIRS = ("tunnel", "tests")
CLASS_RULE_DIRS = ("tunnel",)
IGNORE_FILES = {"__init__.py"}
IGNORE_DIRS = {"__pycache__"}


def _is_name(node: ast.AST, name: str) -> bool:
    return isinstance(node, ast.Name) and node.id == name


def _assigns_all(node: ast.stmt) -> bool:
    if isinstance(node, ast.Assign):
        return any(_is_name(t, "__all__") for t in node.targets)
    if isinstance(node, (ast.AnnAssign, ast.AugAssign)):
        return _is_name(node.target, "__all__")
    if isinstance(node, ast.Expr) and isinstance(node.value, ast.Call):
        func = node.value.func
        return isinstance(func, ast.Attribute) and _is_name(func.value, "__all__")
    return False


def _is_dataclass(node: ast.ClassDef) -> bool:
    for decorator in node.decorator_list:
        target = decorator.func if isinstance(decorator, ast.Call) else decorator
        if isinstance(target, ast.Name) and target.id == "dataclass":
            return True
        if isinstance(target, ast.Attribute) and target.attr == "dataclass":
            return True
    return False


def all_placement_violations(tree: ast.Module, rel: Path) -> list[str]:
    positions = [idx for idx, node in enumerate(tree.body) if _assigns_all(node)]
    if not positions:
        return []
    if len(positions) > 1:
        return [f"  {rel}:{tree.body[idx].lineno} `__all__` assigned more than once" for idx in positions]
    idx = positions[0]
    node = tree.body[idx]
    if isinstance(node, ast.AugAssign) or isinstance(node, ast.Expr):
        return [f"  {rel}:{node.lineno} `__all__` must be a single literal assignment"]
    return [f"  {rel}:{later.lineno} statement defined after `__all__`" for later in tree.body[idx + 1 :]]


def class_count_violations(tree: ast.Module, rel: Path) -> list[str]:
    classes = [n.name for n in tree.body if isinstance(n, ast.ClassDef) and not _is_dataclass(n)]
    if len(classes) > 1:
        return [f"  {rel}: {len(classes)} classes ({', '.join(classes)})"]
    return []


def folder_violations(scan_dir: Path, root: Path) -> list[str]:
    violations: list[str] = []
    for folder in sorted(p for p in scan_dir.rglob("*") if p.is_dir()):
        if folder.name in IGNORE_DIRS or any(part in IGNORE_DIRS for part in folder.parts):
            continue
        children = [
            child
            for child in folder.iterdir()
            if child.name not in IGNORE_FILES
            and child.name not in IGNORE_DIRS
            and (child.is_dir() or child.suffix == ".py")
        ]
        if len(children) == 1:
            violations.append(f"  {folder.relative_to(root)}/ has only {children[0].name}; flatten it")
    return violations


def collect_violations(dirs: tuple[str, ...] | list[str] = DEFAULT_DIRS, root: Path = ROOT) -> list[str]:
    root = root.resolve()
    violations: list[str] = []
    for d in dirs:
        scan_dir = (root / d).resolve()
        if not scan_dir.is_dir():
            continue
        for py_file in sorted(scan_dir.rglob("*.py")):
            if "__pycache__" in py_file.parts:
                continue
            rel = py_file.relative_to(root)
            try:
                tree = ast.parse(py_file.read_text(encoding="utf-8"), filename=str(py_file))
            except SyntaxError as exc:
                violations.append(f"  {rel}: syntax error: {exc}")
                continue
            violations.extend(all_placement_violations(tree, rel))
            if d in CLASS_RULE_DIRS:
                violations.extend(class_count_violations(tree, rel))
        violations.extend(folder_violations(scan_dir, root))
    return violations


def main() -> int:
    parser = argparse.ArgumentParser(description="Check module layout rules.")
    parser.add_argument("--dirs", nargs="+", default=list(DEFAULT_DIRS), help="Directories to scan")
    args = parser.parse_args()

    violations = collect_violations(args.dirs)
    if violations:
        print("Module layout violations:", file=sys.stderr)
        for violation in violations:
            print(violation, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
