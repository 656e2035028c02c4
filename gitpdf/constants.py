# Cipher parameters
KEY_SIZE = 32   # AES-256
IV_SIZE = 16    # AES block size
TAG_SIZE = 16   # GCM authentication tag

SCHEME_CFB = "aes-256-cfb"
SCHEME_GCM = "aes-256-gcm"
SCHEMES = (SCHEME_CFB, SCHEME_GCM)
DEFAULT_SCHEME = SCHEME_CFB


# Codec IDs (0=none, 1=deflate/zlib)
CODEC_NONE = 0
CODEC_DEFLATE = 1

DEFAULT_CODEC_ID = CODEC_DEFLATE
DEFAULT_COMPRESS_LEVEL = 6


# Container defaults
DEFAULT_ATTACHMENT_NAME = "report.csv"
DEFAULT_ATTACHMENT_DESCRIPTION = "Monthly Report"
DEFAULT_TITLE = "Reports"
DEFAULT_BODY = "ACME Corp Monthly Report"


# Configuration environment
ENV_KEY = "GITPDF_KEY"
ENV_KEY_FILE = "GITPDF_KEY_FILE"
ENV_PASSPHRASE = "GITPDF_PASSPHRASE"
ENV_SCHEME = "GITPDF_SCHEME"

# Fixed Argon2id parameters for passphrase-derived keys
ARGON_TIME_COST = 3
ARGON_MEMORY_COST_KIB = 64 * 1024  # 64 MiB
ARGON_PARALLELISM = 4
ARGON_SALT = b"gitpdf-kdf-v1\x00\x00\x00"  # 16 bytes


# Pipeline stage names
STAGE_CREATE_ARCHIVE = "create-archive"
STAGE_ENCRYPT = "encrypt"
STAGE_COMPRESS = "compress"
STAGE_WRITE_CONTAINER = "write-container"
STAGE_READ_CONTAINER = "read-container"
STAGE_DECOMPRESS = "decompress"
STAGE_DECRYPT = "decrypt"
STAGE_RESTORE_ARCHIVE = "restore-archive"
STAGE_VERIFY_ARCHIVE = "verify-archive"

TEMP_PREFIX = "gitpdf-"
