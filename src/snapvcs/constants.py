"""Constants used throughout snapvcs."""

# Version
VERSION = "0.1.0"

# Directory names
REPO_DIR = ".snapvcs"
OBJECTS_DIR = "objects"
REFS_HEADS_DIR = "refs/heads"
REFS_TAGS_DIR = "refs/tags"

# File names
HEAD_FILE = "HEAD"
INDEX_FILE = "index"
CONFIG_FILE = "config"
CONFIG_JSON = "config.json"
DESCRIPTION_FILE = "description"

# Names inside the metadata directory that never count as working-tree files
RESERVED_NAMES = frozenset({
    HEAD_FILE,
    CONFIG_FILE,
    CONFIG_JSON,
    DESCRIPTION_FILE,
    INDEX_FILE,
    OBJECTS_DIR,
})

# Single linear history
DEFAULT_BRANCH = "master"

# Bootstrap file contents
HEAD_CONTENT = f"ref: refs/heads/{DEFAULT_BRANCH}\n"
CONFIG_CONTENT = (
    "[core]\n"
    "\trepositoryformatversion = 0\n"
    "\tfilemode = true\n"
    "\tbare = false\n"
    "\tlogallrefupdates = true\n"
)
DESCRIPTION_CONTENT = (
    "Unnamed repository; edit this file 'description' to name the repository.\n"
)

# Hash algorithm
HASH_ALGORITHM = "sha1"
HASH_LENGTH = 40  # SHA-1 produces 40 hex characters

# Object type tags
BLOB_TYPE = "blob"
COMMIT_TYPE = "commit"
TREE_TYPE = "tree"

# Mode printed in "new file" diff headers
DEFAULT_FILE_MODE = "100644"

# Status output
NO_COMMITS_MESSAGE = (
    "No commits yet\n"
    "nothing to commit (create/copy files and use \"snapvcs add\" to track)\n"
)

# Exit codes
EXIT_SUCCESS = 0
EXIT_FAILURE = 1
