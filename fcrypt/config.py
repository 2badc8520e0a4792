import configparser
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

from .errors import ConflictingModeOptions, MissingModeOption, SettingsError, TargetNotFound
from .keys import validate_or_generate

DEFAULT_CONFIG_NAME = 'config.ini'

DEFAULT_CONFIG_CONTENT = """
[Settings]
# Print the SHA-256 checksum of every file after it has been encrypted.
# Options: yes / no
show_checksums = no

# --- Development Settings ---

# Show CPU/RAM usage next to the progress bar.
debug_mode = no

[UI]
# Style of the progress bar.
# Options: unicode (modern style: ███), ascii (compatible style: ###)
progress_bar_style = unicode

# Show a progress bar while processing a folder.
# Options: yes / no
show_progress = yes
"""


@dataclass(frozen=True)
class Config:
    """Everything one invocation needs, resolved once before any file is touched."""
    mode: str
    target: Path
    target_is_dir: bool
    key: bytes
    key_generated: bool = False
    show_progress: bool = True
    progress_bar_style: str = 'unicode'
    show_checksums: bool = False
    debug_mode: bool = False

    @property
    def use_ascii(self) -> bool:
        return self.progress_bar_style == 'ascii'

    def __repr__(self) -> str:
        return (f"Config(mode={self.mode!r}, target={str(self.target)!r}, "
                f"target_is_dir={self.target_is_dir}, key=<{len(self.key)} bytes>)")


def create_default_config(config_path: Path) -> None:
    """Writes the default settings file; an existing file is never overwritten."""
    if config_path.exists():
        raise SettingsError(f"'{config_path}' already exists.")
    try:
        config_path.write_text(DEFAULT_CONFIG_CONTENT.strip() + "\n", encoding='utf-8')
    except OSError as e:
        raise SettingsError(f"Could not write to '{config_path}'. Error: {e}") from e


def load_settings(config_path: Optional[Path]) -> Dict[str, str]:
    """Reads the INI settings file into one flat dict. A missing file yields defaults."""
    settings: Dict[str, str] = {}
    if config_path is None or not config_path.is_file():
        return settings
    config = configparser.ConfigParser(interpolation=None)
    try:
        config.read(config_path, encoding='utf-8')
    except configparser.Error as e:
        raise SettingsError(f"Error loading {config_path}: {e}") from e
    for section in config.sections():
        settings.update(dict(config.items(section)))
    return settings


def _flag(settings: Dict[str, str], name: str, default: str) -> bool:
    return settings.get(name, default).lower().strip() == 'yes'


def build_config(encrypt_target: Optional[str], decrypt_target: Optional[str],
                 key: Optional[str], rand_key: bool,
                 settings: Optional[Dict[str, str]] = None,
                 show_progress: Optional[bool] = None) -> Config:
    """Validates mode, target and key, in that order, and freezes the result."""
    settings = settings or {}
    if encrypt_target and decrypt_target:
        raise ConflictingModeOptions()
    if not encrypt_target and not decrypt_target:
        raise MissingModeOption()
    mode = 'encrypt' if encrypt_target else 'decrypt'

    target = Path(encrypt_target or decrypt_target)
    try:
        target_is_dir = target.is_dir()
        if not target_is_dir and not target.is_file():
            raise TargetNotFound(target)
    except OSError:
        raise TargetNotFound(target) from None

    raw_key, generated = validate_or_generate(key, rand_key)

    style = settings.get('progress_bar_style', 'unicode').lower().strip()
    if style not in ('unicode', 'ascii'):
        raise SettingsError(f"progress_bar_style must be 'unicode' or 'ascii', not '{style}'")
    if show_progress is None:
        show_progress = _flag(settings, 'show_progress', 'yes')

    return Config(
        mode=mode,
        target=target,
        target_is_dir=target_is_dir,
        key=raw_key,
        key_generated=generated,
        show_progress=show_progress,
        progress_bar_style=style,
        show_checksums=_flag(settings, 'show_checksums', 'no'),
        debug_mode=_flag(settings, 'debug_mode', 'no'),
    )
