"""Tests for MCP server detection from project files."""

import json
import logging
from pathlib import Path

import pytest

from harness_locate.detect import (
    DetectedMcp,
    DetectionConfidence,
    DetectionSource,
    detect_manifest,
    detect_mcp_from_files,
    detect_mcp_in_directory,
    detect_mcp_json,
    detect_npm,
    detect_python,
    requirement_name,
)
from harness_locate.env import EnvRef, Plain
from harness_locate.mcp import HttpMcpServer, StdioMcpServer

STDIO_MANIFEST = {
    "server": {
        "type": "stdio",
        "command": "python",
        "args": ["-m", "mcp_server"],
        "env": {"DEBUG": "1"},
    },
    "tools": [{"name": "search"}],
    "user_config": [
        {"id": "API_KEY", "name": "API Key", "required": True, "secret": True},
        {"id": "REGION", "name": "Region", "required": False},
    ],
}


class TestManifest:
    """Test MCPB manifest.json detection."""

    def test_stdio_server(self) -> None:
        found = detect_manifest(json.dumps(STDIO_MANIFEST))

        assert found == DetectedMcp(
            name="mcpb-server",
            server=StdioMcpServer(
                command="python", args=["-m", "mcp_server"], env={"DEBUG": Plain("1")}
            ),
            source=DetectionSource.MANIFEST,
            confidence=DetectionConfidence.HIGH,
            required_env_vars=("API_KEY",),
        )

    def test_streamable_http_server(self) -> None:
        content = json.dumps(
            {"server": {"type": "streamable-http", "url": "https://mcp.example.com"}}
        )

        found = detect_manifest(content)

        assert found is not None
        assert found.server == HttpMcpServer(url="https://mcp.example.com")
        assert found.required_env_vars == ()

    def test_user_config_keyed_by_id(self) -> None:
        content = json.dumps(
            {
                "server": {"type": "stdio", "command": "node"},
                "user_config": {"token": {"required": True}, "theme": {"required": False}},
            }
        )

        found = detect_manifest(content)

        assert found is not None
        assert found.required_env_vars == ("token",)

    @pytest.mark.parametrize(
        "manifest",
        [
            {"server": {"type": "websocket", "url": "wss://x.example"}},
            {"server": {"type": "stdio", "args": ["no-command"]}},
            {"server": {"type": "http"}},
            {"tools": []},
        ],
    )
    def test_no_usable_server(self, manifest: dict) -> None:
        assert detect_manifest(json.dumps(manifest)) is None

    def test_invalid_json_is_skipped_with_warning(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="harness_locate.detect"):
            assert detect_manifest("{not json") is None

        assert "ignoring manifest.json" in caplog.text


class TestMcpJson:
    """Test .mcp.json detection."""

    def test_bare_server_map(self) -> None:
        detected = detect_mcp_json(
            json.dumps({"my-server": {"command": "npx", "args": ["-y", "mcp-server"]}})
        )

        assert [(d.name, d.source, d.confidence) for d in detected] == [
            ("my-server", DetectionSource.MCP_JSON, DetectionConfidence.HIGH)
        ]
        assert detected[0].server == StdioMcpServer(command="npx", args=["-y", "mcp-server"])

    def test_claude_code_shape_with_env_references(self) -> None:
        content = json.dumps(
            {
                "mcpServers": {
                    "github": {
                        "command": "npx",
                        "env": {"GITHUB_TOKEN": "${GH_TOKEN}", "MODE": "ci"},
                    },
                    "api": {"type": "http", "url": "https://api.example.com/mcp"},
                }
            }
        )

        detected = detect_mcp_json(content)

        assert [d.name for d in detected] == ["github", "api"]
        assert detected[0].server.env["GITHUB_TOKEN"] == EnvRef(env="GH_TOKEN")
        assert detected[0].required_env_vars == ("GH_TOKEN",)
        assert detected[1].required_env_vars == ()

    def test_broken_entries_are_skipped(self) -> None:
        content = json.dumps({"good": {"command": "node"}, "bad": {"args": []}})

        assert [d.name for d in detect_mcp_json(content)] == ["good"]

    def test_non_object_section(self) -> None:
        assert detect_mcp_json(json.dumps({"mcpServers": ["node"]})) == []


class TestPackageJson:
    """Test npm package.json detection."""

    @pytest.mark.parametrize(
        "package",
        [
            {"name": "@modelcontextprotocol/server-github", "version": "1.0.0"},
            {"name": "mcp-server-fetch"},
            {"name": "my-server", "dependencies": {"@modelcontextprotocol/sdk": "^1.0.0"}},
            {"name": "my-server", "devDependencies": {"mcp-testing": "^0.1.0"}},
        ],
    )
    def test_mcp_packages(self, package: dict) -> None:
        found = detect_npm(json.dumps(package))

        assert found is not None
        assert found.name == package["name"]
        assert found.server == StdioMcpServer(command="npx", args=["-y", package["name"]])
        assert found.source is DetectionSource.PACKAGE_JSON
        assert found.confidence is DetectionConfidence.MEDIUM

    @pytest.mark.parametrize(
        "content",
        [
            json.dumps({"name": "express", "dependencies": {"body-parser": "^1.0.0"}}),
            json.dumps({"version": "1.0.0", "dependencies": {"mcp": "^1.0.0"}}),
            "not valid json",
        ],
    )
    def test_not_detected(self, content: str) -> None:
        assert detect_npm(content) is None


class TestPyproject:
    """Test pyproject.toml detection."""

    def test_project_dependencies(self) -> None:
        content = '[project]\nname = "app"\ndependencies = ["mcp>=1.0", "requests"]\n'

        detected = detect_python(content)

        assert [d.name for d in detected] == ["mcp"]
        assert detected[0].server == StdioMcpServer(command="python", args=["-m", "mcp"])
        assert detected[0].source is DetectionSource.PYPROJECT

    def test_prefixed_and_suffixed_names(self) -> None:
        content = '[project]\ndependencies = ["mcp-server-sqlite>=0.1", "awesome-mcp[cli]"]\n'

        detected = detect_python(content)

        assert [d.name for d in detected] == ["mcp-server-sqlite", "awesome-mcp"]
        assert detected[0].server.args == ["-m", "mcp_server_sqlite"]

    def test_optional_dependencies(self) -> None:
        content = '[project.optional-dependencies]\nmcp = ["mcp>=1.0", "mcp-server-git"]\n'

        assert [d.name for d in detect_python(content)] == ["mcp", "mcp-server-git"]

    def test_poetry_dependencies(self) -> None:
        content = (
            "[tool.poetry.dependencies]\n"
            'python = "^3.11"\n'
            'mcp = "^1.0"\n'
            'mcp-server-fetch = { version = "^0.1", optional = true }\n'
        )

        assert [d.name for d in detect_python(content)] == ["mcp", "mcp-server-fetch"]

    def test_package_listed_twice_is_reported_once(self) -> None:
        content = (
            '[project]\ndependencies = ["mcp>=1.0"]\n\n'
            '[project.optional-dependencies]\ndev = ["mcp[cli]"]\n'
        )

        assert [d.name for d in detect_python(content)] == ["mcp"]

    def test_ignores_other_packages(self) -> None:
        assert detect_python('[project]\ndependencies = ["requests", "flask", "numpy"]\n') == []

    def test_invalid_toml_is_skipped_with_warning(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="harness_locate.detect"):
            assert detect_python("[project\n") == []

        assert "ignoring pyproject.toml" in caplog.text


@pytest.mark.parametrize(
    ("requirement", "expected"),
    [
        ("mcp>=1.0", "mcp"),
        ("mcp[cli] ; python_version >= '3.10'", "mcp"),
        ("  zope.interface~=5.0", "zope.interface"),
        (">=1.0", None),
    ],
)
def test_requirement_name(requirement: str, expected: str | None) -> None:
    assert requirement_name(requirement) == expected


def test_sources_are_reported_in_priority_order() -> None:
    files = {
        "pyproject.toml": '[project]\ndependencies = ["mcp"]\n',
        "package.json": json.dumps(
            {"name": "test-pkg", "dependencies": {"@modelcontextprotocol/server-npm": "^1.0.0"}}
        ),
        ".mcp.json": json.dumps({"mcp-server": {"command": "node", "args": ["b.js"]}}),
        "manifest.json": json.dumps(
            {"server": {"type": "stdio", "command": "node", "args": ["a.js"]}}
        ),
    }

    detected = detect_mcp_from_files(files)

    assert [d.source for d in detected] == [
        DetectionSource.MANIFEST,
        DetectionSource.MCP_JSON,
        DetectionSource.PACKAGE_JSON,
        DetectionSource.PYPROJECT,
    ]
    assert [d.confidence for d in detected] == [
        DetectionConfidence.HIGH,
        DetectionConfidence.HIGH,
        DetectionConfidence.MEDIUM,
        DetectionConfidence.MEDIUM,
    ]


def test_both_mcp_json_files_are_read() -> None:
    files = {
        ".mcp.json": json.dumps({"one": {"command": "a"}}),
        "mcp.json": json.dumps({"two": {"command": "b"}}),
        "README.md": "# not inspected",
    }

    assert [d.name for d in detect_mcp_from_files(files)] == ["one", "two"]


def test_no_files() -> None:
    assert detect_mcp_from_files({}) == []


def test_confidence_ordering() -> None:
    assert DetectionConfidence.LOW < DetectionConfidence.MEDIUM < DetectionConfidence.HIGH
    assert max(DetectionConfidence).label == "high"


def test_detect_in_directory(tmp_path: Path) -> None:
    (tmp_path / ".mcp.json").write_text(json.dumps({"fs": {"command": "npx"}}))
    (tmp_path / "package.json").write_text(json.dumps({"name": "mcp-fs"}))
    (tmp_path / "notes.txt").write_text("ignored")

    detected = detect_mcp_in_directory(tmp_path)

    assert [(d.name, d.source) for d in detected] == [
        ("fs", DetectionSource.MCP_JSON),
        ("mcp-fs", DetectionSource.PACKAGE_JSON),
    ]


def test_detect_in_empty_directory(tmp_path: Path) -> None:
    assert detect_mcp_in_directory(tmp_path) == []
