"""Locate AI coding-assistant harnesses and translate their MCP server configs."""

from harness_locate.detect import (
    DetectedMcp,
    DetectionConfidence,
    DetectionSource,
    detect_mcp_from_files,
    detect_mcp_in_directory,
)
from harness_locate.env import EnvRef, EnvValue, Plain
from harness_locate.errors import (
    ConfigReadError,
    FrontmatterError,
    HarnessLocateError,
    HarnessNotFoundError,
    McpConfigError,
    MissingEnvVarError,
    MissingFieldError,
    UnknownHarnessError,
    UnsupportedMcpConfigError,
    UnsupportedScopeError,
)
from harness_locate.harness import Harness
from harness_locate.mcp import (
    HttpMcpServer,
    McpCapabilities,
    McpServer,
    OAuthConfig,
    SseMcpServer,
    StdioMcpServer,
    capabilities_for,
    dump_server,
    load_server,
    supports_server,
)
from harness_locate.translate import (
    DecodeResult,
    decode,
    decode_all,
    decode_all_detailed,
    encode,
    encode_all,
    translate,
)
from harness_locate.types import (
    ALL_HARNESSES,
    ConfigResource,
    DirectoryResource,
    DirectoryStructure,
    FileFormat,
    HarnessKind,
    InstallationStatus,
    ResourceKind,
    Scope,
)
from harness_locate.validation import (
    Severity,
    ValidationIssue,
    validate,
    validate_for_harness,
)

__version__ = "0.1.0"

__all__ = [
    "ALL_HARNESSES",
    "ConfigReadError",
    "ConfigResource",
    "DecodeResult",
    "DetectedMcp",
    "DetectionConfidence",
    "DetectionSource",
    "DirectoryResource",
    "DirectoryStructure",
    "EnvRef",
    "EnvValue",
    "FileFormat",
    "FrontmatterError",
    "Harness",
    "HarnessKind",
    "HarnessLocateError",
    "HarnessNotFoundError",
    "HttpMcpServer",
    "InstallationStatus",
    "McpCapabilities",
    "McpConfigError",
    "McpServer",
    "MissingEnvVarError",
    "MissingFieldError",
    "OAuthConfig",
    "Plain",
    "ResourceKind",
    "Scope",
    "Severity",
    "SseMcpServer",
    "StdioMcpServer",
    "UnknownHarnessError",
    "UnsupportedMcpConfigError",
    "UnsupportedScopeError",
    "ValidationIssue",
    "__version__",
    "capabilities_for",
    "decode",
    "decode_all",
    "decode_all_detailed",
    "detect_mcp_from_files",
    "detect_mcp_in_directory",
    "dump_server",
    "encode",
    "encode_all",
    "load_server",
    "supports_server",
    "translate",
    "validate",
    "validate_for_harness",
]
