"""
Project constants definitions
"""

# ============================================================
# Configuration
# ============================================================

CONFIG_FILE_NAME = "deploy.toml"
ENV_PREFIX = "RDEPLOY_"

# ============================================================
# SSH / SFTP
# ============================================================

DEFAULT_SSH_PORT = 22
REMOTE_FILE_MODE = 0o644
SFTP_COPY_BUFSIZE = 32 * 1024
CHANNEL_RECV_BUFSIZE = 4096
STREAM_POLL_INTERVAL = 0.01

# Filesystem metadata noise in remote output (macOS Finder files in archives)
NOISE_MARKER = ".DS_Store"

# ============================================================
# Deploy
# ============================================================

APPS_ARCHIVE_NAME = "apps.tar.gz"
CFG_ARCHIVE_NAME = "cfgHome.tar.gz"

SHUTDOWN_SCRIPT = "shutdown.sh"
STARTUP_SCRIPT = "startup.sh"
SHOWLOG_SCRIPT = "showLogs.sh"

LOGIN_SHELL = "bash"

# ============================================================
# Change detection
# ============================================================

DIGEST_CACHE_NAME = "md5_cache.json"
STAGING_DIR_NAME = "temp"
HASH_READ_BLOCK = 8192

# ============================================================
# Maven
# ============================================================

MAVEN_HOME_ENV_VARS = ("MAVEN_HOME", "M2_HOME")
