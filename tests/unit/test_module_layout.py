from __future__ import annotations

from pathlib import Path

from linting.module_layout import collect_violations


def test_repository_follows_layout_rules() -> None:
    assert collect_violations() == []


def test_layout_rules_flag_violations(tmp_path: Path) -> None:
    pkg = tmp_path / "tunnel"
    (pkg / "wrapper").mkdir(parents=True)
    (pkg / "wrapper" / "only.py").write_text("")
    (pkg / "late_all.py").write_text('__all__ = ["a"]\n\ndef a():\n    return 1\n')
    (pkg / "two_classes.py").write_text(
        "from dataclasses import dataclass\n\n"
        "@dataclass\nclass Fine:\n    x: int\n\n"
        "class A:\n    pass\n\n"
        "class B:\n    pass\n"
    )

    violations = collect_violations(["tunnel"], root=tmp_path)

    assert any("late_all.py" in v and "after `__all__`" in v for v in violations)
    assert any("two_classes.py" in v and "(A, B)" in v for v in violations)
    assert any("wrapper/ has only only.py" in v for v in violations)
    assert len(violations) == 3
