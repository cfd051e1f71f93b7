"""Command-line front end for the hybrid translator.

Translates text given on the command line, one text per line from a file, or a JSON bundle of
UI strings. Providers are configured in translator.ini; API keys are read from the environment
(LIBRETRANSLATE_API_KEY, HUGGINGFACE_API_KEY, DEEPL_API_KEY).

Translations go to stdout; errors and warnings go to stderr.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any, Final, NoReturn

from config.loader import Config, ConfigLoader, ConfigLoaderError
from core.shared_data import SharedData
from core.trans.interface import TranslateExceptionError, TranslationValidationError
from core.version import VERSION
from utils.file_utils import FileUtils
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    from core.trans.manager import TransManager
    from models.translation_models import TranslationOutcome

CFG_FILE: Final[str] = "translator.ini"


def check_python_version() -> None:
    """Check if Python version is 3.12 or later.

    Raises:
        RuntimeError: If Python version is below 3.12.
    """
    if sys.version_info < (3, 12):
        msg = "Python 3.12 or later is required"
        raise RuntimeError(msg)


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> NoReturn:
        print(f"\n{message}\n", file=sys.stderr)
        self.print_help(sys.stderr)
        raise SystemExit(2)


def parse_arguments(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        argparse.Namespace: Parsed arguments.
    """
    parser = _ArgumentParser(
        description="Translate text by racing several machine translation providers",
        epilog='Example: python hybrid_translate.py --to ja "Hello, world"',
    )
    parser.add_argument("text", nargs="*", metavar="TEXT", help="Text to translate")
    parser.add_argument("-t", "--to", dest="tgt_lang", metavar="LANG", help="Target language code")
    parser.add_argument("-f", "--from", dest="src_lang", metavar="LANG", help="Source language code")
    parser.add_argument("-c", "--config", dest="config", default=CFG_FILE, metavar="FILE", help="Configuration file")
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--batch", dest="batch", metavar="FILE", help="Translate each line of FILE")
    source.add_argument("--bundle", dest="bundle", metavar="FILE", help="Translate the string values of a JSON file")
    parser.add_argument("--detail", action="store_true", help="Show provider and quality score")
    parser.add_argument("--languages", action="store_true", help="List the languages of the available providers")
    parser.add_argument("--stats", action="store_true", help="Print the performance summary on exit")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")

    args: argparse.Namespace = parser.parse_args(argv)
    if not args.languages and not args.tgt_lang:
        parser.error("the following arguments are required: -t/--to")
    if not args.languages and not (args.text or args.batch or args.bundle):
        parser.error("nothing to translate: give TEXT, --batch or --bundle")
    return args


def load_config(args: argparse.Namespace) -> Config:
    """Load the configuration file and apply CLI overrides.

    Raises:
        ConfigLoaderError: If configuration file cannot be loaded.
    """
    script_name: str = Path(sys.argv[0]).stem
    return ConfigLoader(config_filename=args.config, script_name=script_name, debug=args.debug).config


def setup_logging(config: Config) -> None:
    log_file: str = str(FileUtils.resolve_path(config.GENERAL.LOG_FILE)) if config.GENERAL.LOG_FILE else ""
    logger_utils = LoggerUtils(log_file)
    logger_utils.set_level("DEBUG" if config.GENERAL.DEBUG else config.GENERAL.LOG_LEVEL)


def format_outcome(outcome: TranslationOutcome, *, detail: bool) -> str:
    if not detail:
        return outcome.text
    if outcome.from_cache:
        return f"{outcome.text}\t[{outcome.provider}, cached]"
    score: str = f"{outcome.quality.score:.2f}" if outcome.quality is not None else "-"
    return f"{outcome.text}\t[{outcome.provider}, quality {score}]"


async def run(args: argparse.Namespace, trans_manager: TransManager) -> None:
    """Dispatch to the requested translation mode and print the results."""
    if args.languages:
        print(" ".join(sorted(trans_manager.get_supported_languages())))
        return

    if args.bundle:
        bundle: dict[str, Any] = json.loads(Path(args.bundle).read_text(encoding="utf-8"))
        if not isinstance(bundle, dict):
            msg = f"Bundle file must contain a JSON object: {args.bundle}"
            raise ValueError(msg)
        translated: dict[str, Any] = await trans_manager.translate_bundle(bundle, args.tgt_lang, args.src_lang)
        print(json.dumps(translated, ensure_ascii=False, indent=2))
        return

    if args.batch:
        lines: list[str] = Path(args.batch).read_text(encoding="utf-8").splitlines()
        for line in await trans_manager.translate_batch(lines, args.tgt_lang, args.src_lang):
            print(line)
        return

    outcome: TranslationOutcome = await trans_manager.translate_detailed(
        " ".join(args.text), args.tgt_lang, args.src_lang
    )
    print(format_outcome(outcome, detail=args.detail))


async def main(argv: list[str] | None = None) -> int:
    """Main entry point.

    Performs the following steps:
    1. Check Python version
    2. Parse command-line arguments and load configuration
    3. Start the cache, in-flight manager and providers
    4. Translate and print the result
    5. Shut everything down, printing the performance summary on request

    Returns:
        int: Process exit code.
    """
    check_python_version()
    args: argparse.Namespace = parse_arguments(argv)
    try:
        config: Config = load_config(args)
    except ConfigLoaderError as err:
        print("\nError: Failed to load configuration file.", file=sys.stderr)
        print(f"Details: {err}", file=sys.stderr)
        return 1

    setup_logging(config)
    shared_data = SharedData(config)
    await shared_data.async_init()
    await shared_data.component_load()
    try:
        await run(args, shared_data.trans_manager)
    except TranslationValidationError as err:
        print(f"\nInvalid request: {err}", file=sys.stderr)
        return 2
    except TranslateExceptionError as err:
        print(f"\nTranslation failed: {err}", file=sys.stderr)
        return 1
    except (OSError, ValueError) as err:
        print(f"\nError: {err}", file=sys.stderr)
        return 1
    finally:
        if args.stats:
            print(shared_data.metrics_collector.get_performance_summary(), file=sys.stderr)
        await shared_data.component_teardown()
    return 0


if __name__ == "__main__":
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        print("\n\nTranslation cancelled by user.", file=sys.stderr)
        sys.exit(130)
    except RuntimeError as err:
        print(f"\nFatal error: {err}", file=sys.stderr)
        sys.exit(1)
