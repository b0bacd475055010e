"""
Constants and configuration values for artifactfetch.

This module contains the hardcoded names, URLs, timeouts and environment
variables used throughout the installer.
"""

# Release host
DEFAULT_DOWNLOAD_HOST = "https://github.com"
DEFAULT_HOST_ENV_VAR = "DOWNLOAD_HOST"
RELEASE_DOWNLOAD_PATH = "releases/download"

# Network settings (in seconds)
DEFAULT_REQUEST_TIMEOUT = 30
DEFAULT_CHUNK_SIZE = 8192

# Compression codecs, tried in this order
BROTLI_CODEC = "brotli"
GZIP_CODEC = "gzip"
BROTLI_EXTENSION = ".br"
GZIP_EXTENSION = ".gz"

# Development mode
DEV_SKIP_ENV_VAR = "DEVELOPMENT_SKIP_GETTING_ASSET"
DEV_SHOW_VERIFICATION_ENV_VAR = "DEVELOPMENT_SHOW_VERIFICATION_RESULTS"
DEV_MARKER_FILE = ".development"

# Manifest
MANIFEST_FILE_NAME = "pyproject.toml"
MANIFEST_TOOL_SECTION = "artifactfetch"
MANIFEST_GITHUB_KEY = "github"
MANIFEST_VERIFY_BUILD_KEY = "verify-build"
MANIFEST_TEST_KEY = "test"
MANIFEST_REBUILD_KEY = "rebuild"
# [project.urls] keys checked for a repository location, in order
MANIFEST_REPOSITORY_URL_KEYS = ("Repository", "Source", "Homepage")

# Platform probes
GLIBC_PROBE_COMMAND = ("getconf", "GNU_LIBC_VERSION")
LIBC_INFO_PROBE_COMMAND = ("ldd", "--version")
MUSL_MARKER = "musl"
MUSL_VARIANT = "musl"
ARCH_ALIASES = {"amd64": "x86_64"}

# User configuration
APP_NAME = "artifactfetch"
CONFIG_FILE_NAME = "artifactfetch.yaml"

# Logging configuration
LOGGER_NAME = "artifactfetch"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
INFO_LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
DEBUG_LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s: %(message)s"
LOG_FILE_NAME = "artifactfetch.log"
LOG_FILE_MAX_BYTES = 10 * 1024 * 1024  # 10 MB
LOG_FILE_BACKUP_COUNT = 5

# Environment variable names
LOG_LEVEL_ENV_VAR = "ARTIFACTFETCH_LOG_LEVEL"

# Messages
MSG_TRYING = "Trying {url} ..."
MSG_WRITING = "Writing to {path} ..."
MSG_DONE = "Done."
MSG_BUILDING_LOCALLY = "Building locally ..."
MSG_NO_MANIFEST = "Could not retrieve and parse {path}."
MSG_NO_ARTIFACT = "No artifact path was specified with --artifact."
MSG_DEV_FLAG = "Development flag was detected."
MSG_NO_REPOSITORY = "No github repository was identified."
MSG_NO_VERIFY_COMMAND = (
    "No verify-build nor test commands were found -- "
    "no way to verify the build automatically."
)
MSG_VERIFICATION_FAILED = "The verification has failed: building from sources ..."
