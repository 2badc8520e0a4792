class FcryptError(Exception):
    """Base class for fcrypt errors."""


# Configuration: raised before any file is touched
class ConfigurationError(FcryptError):
    pass


class ConflictingModeOptions(ConfigurationError):
    def __init__(self) -> None:
        super().__init__("You cannot provide both the -e and -d flags")


class MissingModeOption(ConfigurationError):
    def __init__(self) -> None:
        super().__init__("You must provide either the -e or -d flag")


class TargetNotFound(ConfigurationError):
    def __init__(self, target) -> None:
        self.target = target
        super().__init__(f"{target} not found")


class ConflictingKeyOptions(ConfigurationError):
    def __init__(self) -> None:
        super().__init__("You cannot provide both the -k and --rand-key flags")


class MissingKeyOption(ConfigurationError):
    def __init__(self) -> None:
        super().__init__("You must either specify a key (-k) or provide the --rand-key flag")


class InvalidKeyLength(ConfigurationError):
    def __init__(self, length: int, expected: int = 32) -> None:
        self.length = length
        self.expected = expected
        super().__init__(f"Key must be {expected} bytes long (got {length})")


class SettingsError(ConfigurationError):
    pass


# Per-file: recorded and skipped, the run continues
class FileProcessingError(FcryptError):
    def __init__(self, path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


class FileReadFailed(FileProcessingError):
    pass


class FileWriteFailed(FileProcessingError):
    pass


class AuthenticationFailed(FileProcessingError):
    def __init__(self, path=None, reason: str = "Wrong key or corrupt data.") -> None:
        super().__init__(path if path is not None else "<buffer>", reason)


# Traversal
class SymlinkCycleDetected(FcryptError):
    def __init__(self, path) -> None:
        self.path = path
        super().__init__(f"{path}: directory already visited (symlink loop), subtree skipped")
