"""依存境界（core/shapes/composers/render/export）の破りを検出するテスト。"""

from __future__ import annotations

import ast
from pathlib import Path


def _repo_root() -> Path:
    path = Path(__file__).resolve()
    for parent in path.parents:
        if (parent / "src").is_dir() and (parent / "tests").is_dir():
            return parent
    raise RuntimeError("repo root が見つからない")


def _iter_py_files(root: Path) -> list[Path]:
    return sorted([p for p in root.rglob("*.py") if p.is_file()])


def _module_name_for_path(*, path: Path, src_root: Path) -> tuple[str, bool]:
    parts = list(path.relative_to(src_root).parts)
    is_package = parts[-1] == "__init__.py"
    if is_package:
        parts = parts[:-1]
    else:
        parts[-1] = parts[-1].removesuffix(".py")
    return ".".join(parts), is_package


def _resolve_importfrom_targets(
    *,
    current_module: str,
    is_package: bool,
    node: ast.ImportFrom,
) -> set[str]:
    level = int(node.level or 0)
    if level == 0:
        if node.module is None:
            return set()
        base = str(node.module)
    else:
        current_package = current_module if is_package else current_module.rsplit(".", 1)[0]
        parts = current_package.split(".")
        up = level - 1
        if up >= len(parts):
            raise ValueError(f"相対 import の解決に失敗: current_module={current_module!r}, level={level}")
        base = ".".join(parts[: len(parts) - up])
        if node.module is not None:
            base = f"{base}.{node.module}"

    targets = {base}
    for alias in node.names:
        if alias.name != "*":
            targets.add(f"{base}.{alias.name}")
    return targets


def _import_modules_in_file(*, path: Path, src_root: Path) -> set[str]:
    current_module, is_package = _module_name_for_path(path=path, src_root=src_root)
    tree = ast.parse(path.read_text(encoding="utf-8"))
    modules: set[str] = set()
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            modules.update(str(alias.name) for alias in node.names)
        elif isinstance(node, ast.ImportFrom):
            modules.update(
                _resolve_importfrom_targets(current_module=current_module, is_package=is_package, node=node)
            )
    return modules


def _assert_no_forbidden_imports(*, root: Path, forbidden_prefixes: tuple[str, ...]) -> None:
    repo_root = _repo_root()
    src_root = repo_root / "src"
    violations: list[str] = []
    for path in _iter_py_files(root):
        rel = path.relative_to(repo_root)
        modules = _import_modules_in_file(path=path, src_root=src_root)
        bad = sorted([m for m in modules if m.startswith(forbidden_prefixes)])
        if bad:
            violations.append(f"{rel}: {', '.join(bad)}")

    if violations:
        joined = "\n".join(violations)
        raise AssertionError(f"依存境界違反の import を検出:\n{joined}")


def test_core_does_not_depend_on_upper_layers() -> None:
    root = _repo_root()
    _assert_no_forbidden_imports(
        root=root / "src" / "plakat" / "core",
        forbidden_prefixes=("plakat.shapes", "plakat.composers", "plakat.render", "plakat.export", "plakat.cli"),
    )


def test_shapes_do_not_depend_on_composers_or_output() -> None:
    root = _repo_root()
    _assert_no_forbidden_imports(
        root=root / "src" / "plakat" / "shapes",
        forbidden_prefixes=("plakat.composers", "plakat.render", "plakat.export"),
    )


def test_composers_build_scene_graph_only() -> None:
    root = _repo_root()
    _assert_no_forbidden_imports(
        root=root / "src" / "plakat" / "composers",
        forbidden_prefixes=("plakat.render", "plakat.export", "xml"),
    )


def test_export_does_not_depend_on_composition() -> None:
    root = _repo_root()
    _assert_no_forbidden_imports(
        root=root / "src" / "plakat" / "export",
        forbidden_prefixes=("plakat.composers", "plakat.shapes", "plakat.render"),
    )


def test__resolve_importfrom_targets_handles_relative_imports() -> None:
    node = ast.parse("from ..export import svg\n").body[0]
    assert isinstance(node, ast.ImportFrom)
    got = _resolve_importfrom_targets(current_module="plakat.core.scene", is_package=False, node=node)
    assert "plakat.export" in got
    assert "plakat.export.svg" in got

    node = ast.parse("from . import exact\n").body[0]
    assert isinstance(node, ast.ImportFrom)
    got = _resolve_importfrom_targets(current_module="plakat.shapes", is_package=True, node=node)
    assert "plakat.shapes.exact" in got
