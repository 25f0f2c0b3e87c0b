from __future__ import annotations

from pathlib import Path

import orjson
import pytest

from cli import main
from conftest import MavenRepo, commit_all, module_pom, write


def test_cli_prints_one_identity_per_line(
    maven_repo: MavenRepo, capsys: pytest.CaptureFixture[str]
) -> None:
    exit_code = main(
        [
            "--parent-pom-file",
            str(maven_repo.root_pom),
            "--compared-to-commit",
            "v1",
            "--current-commit",
            "v2",
            "--include-dependencies",
        ]
    )

    assert exit_code == 0
    captured = capsys.readouterr()
    assert captured.out.splitlines() == [
        "com.example::app",
        "com.example::core",
        "com.example::service",
    ]
    assert captured.err == ""


def test_cli_json_format(maven_repo: MavenRepo, capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = main(
        [
            "--parent-pom-file",
            str(maven_repo.root_pom),
            "--compared-to-commit",
            "v2",
            "--format",
            "json",
        ]
    )

    assert exit_code == 0
    assert orjson.loads(capsys.readouterr().out) == ["com.example::core"]


def test_cli_time_execution_reports_steps_on_stderr(
    maven_repo: MavenRepo, capsys: pytest.CaptureFixture[str]
) -> None:
    exit_code = main(
        [
            "--parent-pom-file",
            str(maven_repo.root_pom),
            "--compared-to-commit",
            "v1",
            "--include-dependents",
            "--time-execution",
        ]
    )

    assert exit_code == 0
    captured = capsys.readouterr()
    assert "Timer basic - 'setup' took" in captured.err
    assert "'dependents queue completion'" in captured.err
    assert "'computation of final result'" in captured.err
    assert "Timer" not in captured.out


def test_cli_failure_prints_nothing_to_stdout(
    maven_repo: MavenRepo, capsys: pytest.CaptureFixture[str]
) -> None:
    exit_code = main(
        [
            "--parent-pom-file",
            str(maven_repo.root_pom),
            "--compared-to-commit",
            "no-such-tag",
        ]
    )

    assert exit_code == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err.startswith("error: ")


def test_cli_rejects_missing_descriptor(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    with pytest.raises(SystemExit) as exc_info:
        main(["--parent-pom-file", str(tmp_path / "pom.xml")])

    assert exc_info.value.code == 2
    assert "does not exist" in capsys.readouterr().err


def test_cli_outside_git_reports_precondition(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    pom = tmp_path / "pom.xml"
    pom.write_text("<project><artifactId>x</artifactId></project>", encoding="utf-8")

    exit_code = main(["--parent-pom-file", str(pom)])

    assert exit_code == 1
    assert "not part of a git repository" in capsys.readouterr().err


def test_cli_reports_dependency_cycles_on_stderr(
    maven_repo: MavenRepo, capsys: pytest.CaptureFixture[str]
) -> None:
    write(
        maven_repo.root / "core" / "pom.xml",
        module_pom("core", [("com.example", "app")]),
    )
    commit_all(maven_repo.root, "core depends on app")

    exit_code = main(
        [
            "--parent-pom-file",
            str(maven_repo.root_pom),
            "--compared-to-commit",
            "v3",
            "--include-dependents",
        ]
    )

    assert exit_code == 0
    captured = capsys.readouterr()
    assert captured.out.splitlines() == [
        "com.example::app",
        "com.example::core",
        "com.example::service",
    ]
    assert (
        "dependency cycle between modules: "
        "com.example::app, com.example::core, com.example::service"
    ) in captured.err
