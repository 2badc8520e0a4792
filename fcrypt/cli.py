# fcrypt/cli.py
import argparse
from pathlib import Path
from typing import List, Optional

from . import VERSION_NUMBER
from . import core
from . import utils
from .config import DEFAULT_CONFIG_NAME, build_config, create_default_config, load_settings
from .errors import ConfigurationError, InvalidKeyLength, SettingsError, TargetNotFound


def print_help() -> None:
    print(f"\t\t\tfcrypt {VERSION_NUMBER}")
    print("\tEncrypt and decrypt files and directories using AES256\n")
    print("Usage: fcrypt -e/-d tgt_file_or_dir -k key / [--rand-key]\n")
    print("ENCRYPTION:")
    print("\t-e tgt_file_or_dir: File or directory to encrypt, REQUIRED")
    print("\t-k encryption_key: The encryption key to use, REQUIRED IF NO --rand-key")
    print("\t--rand-key: Generate and use a random key, REQUIRED IF NO -k flag\n")
    print("DECRYPTION:")
    print("\t-d tgt_file_or_dir: File or directory to decrypt, REQUIRED")
    print("\t-k decryption_key: The decryption key to use, REQUIRED\n")
    print("OTHERS:")
    print(f"\t--config path: Settings file to use (default: {DEFAULT_CONFIG_NAME})")
    print("\t--init-config: Write a default settings file and exit")
    print("\t--no-progress: Do not show a progress bar")
    print("\t-h: Print out this help message")
    print("\t-v: Print out the version number\n")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='fcrypt', add_help=False)
    parser.add_argument('-h', '--help', action='store_true')
    parser.add_argument('-v', '--version', action='store_true')
    parser.add_argument('-e', dest='encrypt_target', metavar='tgt_file_or_dir')
    parser.add_argument('-d', dest='decrypt_target', metavar='tgt_file_or_dir')
    parser.add_argument('-k', dest='key', metavar='key')
    parser.add_argument('--rand-key', action='store_true')
    parser.add_argument('--config', default=DEFAULT_CONFIG_NAME, metavar='path')
    parser.add_argument('--init-config', action='store_true')
    parser.add_argument('--no-progress', action='store_true')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Runs one invocation. Returns 0 when every file succeeded, 1 on partial failure, 2 on bad usage."""
    args = build_parser().parse_args(argv)
    if args.help:
        print_help()
        return 0
    if args.version:
        print(VERSION_NUMBER)
        return 0

    config_path = Path(args.config)
    if args.init_config:
        try:
            create_default_config(config_path)
        except SettingsError as e:
            print(f"❌ Error: {e}")
            return 2
        print(f"✅ Default '{config_path}' created successfully.")
        return 0

    try:
        settings = load_settings(config_path)
        config = build_config(
            args.encrypt_target,
            args.decrypt_target,
            args.key,
            args.rand_key,
            settings=settings,
            show_progress=False if args.no_progress else None,
        )
    except ConfigurationError as e:
        print(f"Error: {e}")
        if not isinstance(e, (TargetNotFound, InvalidKeyLength, SettingsError)):
            print_help()
        return 2

    print(f"🔒 fcrypt {VERSION_NUMBER} 🔒{utils.get_title_suffix(config.debug_mode)}")
    print("=" * 45)
    if config.key_generated:
        print(f"rand_key: {config.key.decode('ascii')}")
        if config.mode == 'encrypt':
            print("ℹ️ Keep this key safe. It is stored nowhere and is required for decryption.")
        else:
            print("ℹ️ A random key cannot match a key used earlier; decryption will fail.")

    report = core.run(config)
    return 0 if report.state is core.RunState.DONE else 1
