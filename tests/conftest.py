from __future__ import annotations

import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path

import pytest

requires_git = pytest.mark.skipif(
    shutil.which("git") is None, reason="git is required for repository tests"
)

POM_NS = "http://maven.apache.org/POM/4.0.0"

ROOT_POM = f"""<?xml version="1.0" encoding="UTF-8"?>
<project xmlns="{POM_NS}">
  <modelVersion>4.0.0</modelVersion>
  <groupId>com.example</groupId>
  <artifactId>parent</artifactId>
  <version>1.0.0</version>
  <packaging>pom</packaging>
  <modules>
    <module>core</module>
    <module>service</module>
    <module>app</module>
    <module>tools</module>
  </modules>
</project>
"""


def module_pom(
    artifact_id: str | None, dependencies: list[tuple[str, str]] | None = None
) -> str:
    deps = "".join(
        f"""
    <dependency>
      <groupId>{group}</groupId>
      <artifactId>{artifact}</artifactId>
    </dependency>"""
        for group, artifact in dependencies or []
    )
    artifact = f"\n  <artifactId>{artifact_id}</artifactId>" if artifact_id else ""
    return f"""<?xml version="1.0" encoding="UTF-8"?>
<project xmlns="{POM_NS}">
  <modelVersion>4.0.0</modelVersion>
  <parent>
    <groupId>com.example</groupId>
    <artifactId>parent</artifactId>
    <version>1.0.0</version>
  </parent>{artifact}
  <dependencies>{deps}
  </dependencies>
</project>
"""


def git(root: Path, *args: str) -> str:
    proc = subprocess.run(
        [
            "git",
            "-c",
            "user.name=Tests",
            "-c",
            "user.email=tests@example.com",
            "-c",
            "commit.gpgsign=false",
            *args,
        ],
        cwd=root,
        check=True,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
    )
    return proc.stdout.strip()


def commit_all(root: Path, message: str) -> str:
    git(root, "add", "-A")
    git(root, "commit", "-q", "-m", message)
    return git(root, "rev-parse", "HEAD")


def write(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


@dataclass(frozen=True)
class MavenRepo:
    """Three-commit project: app changes in v2, core changes in v3.

    Edges: app -> service -> core. ``tools`` has no artifact id and also
    depends on core; ``docs`` holds no descriptor.
    """

    root: Path

    @property
    def root_pom(self) -> Path:
        return self.root / "pom.xml"


def build_maven_repo(root: Path) -> MavenRepo:
    root.mkdir(parents=True, exist_ok=True)
    git(root, "init", "-q")
    git(root, "symbolic-ref", "HEAD", "refs/heads/main")

    write(root / "pom.xml", ROOT_POM)
    write(root / "core" / "pom.xml", module_pom("core", [("junit", "junit")]))
    write(
        root / "service" / "pom.xml",
        module_pom("service", [("${project.groupId}", "core")]),
    )
    write(root / "app" / "pom.xml", module_pom("app", [("com.example", "service")]))
    write(root / "tools" / "pom.xml", module_pom(None, [("com.example", "core")]))
    for name in ("core", "service", "app", "tools"):
        write(root / name / "src" / "Main.java", f"class {name.title()} {{}}\n")
    write(root / "docs" / "readme.txt", "docs\n")
    commit_all(root, "initial")
    git(root, "tag", "v1")

    write(root / "app" / "src" / "Main.java", "class App { int x; }\n")
    commit_all(root, "change app")
    git(root, "tag", "v2")

    write(root / "core" / "src" / "Main.java", "class Core { int y; }\n")
    commit_all(root, "change core")
    git(root, "tag", "v3")

    return MavenRepo(root=root)


@pytest.fixture
def maven_repo(tmp_path: Path) -> MavenRepo:
    if shutil.which("git") is None:
        pytest.skip("git is required for repository tests")
    return build_maven_repo(tmp_path / "repo")
