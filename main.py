"""
EGLD AI Price Predictor - Main Application
Features:
- Live EGLD price polled from CoinGecko every 30 seconds
- Randomly generated "predicted" price for a chosen timeframe
- Two console screens: live price + timeframe selector, and prediction

Usage:
    python main.py                          # Start interactive predictor (WARNING level console logs)
    python main.py --once                   # Fetch the current price once and exit
    python main.py --interval 10            # Poll every 10 seconds
    python main.py --log-level INFO         # More verbose console logs
    python main.py --debug                  # Full debug mode with traceback
    python main.py --help                   # Show help
"""

import asyncio
import logging
import sys
import argparse
import os
import traceback
from typing import Optional

from price_predictor import __version__
from price_predictor.config import Settings, get_settings
from price_predictor.core.predictor_app import PredictorApp, fetch_once
from price_predictor.exceptions import FeedUnavailable
from price_predictor.ui.console import ConsoleUI, format_time, format_usd


# Configure logging with debug support
def setup_logging(log_level: str = "WARNING", debug_mode: bool = False,
                  log_file: Optional[str] = "logs/predictor.log"):
    """Setup logging configuration with debug mode support"""

    # Clear any existing handlers
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    # Set log level
    numeric_level = getattr(logging, log_level.upper())
    root_logger.setLevel(logging.DEBUG)

    # Create formatters
    if debug_mode:
        # Debug mode - detailed formatting with file/line info
        console_formatter = logging.Formatter(
            '%(asctime)s - %(levelname)s - [%(name)s:%(filename)s:%(lineno)d] %(message)s',
            datefmt='%H:%M:%S'
        )
    else:
        console_formatter = logging.Formatter(
            '%(asctime)s - %(levelname)s - %(message)s',
            datefmt='%H:%M:%S'
        )
    file_formatter = logging.Formatter(
        '%(asctime)s - %(levelname)s - [%(name)s:%(lineno)d] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    # File handler (always DEBUG level for complete logs)
    if not debug_mode and log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(file_formatter)
        root_logger.addHandler(file_handler)

    # Console handler on stderr; stdout belongs to the UI
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.DEBUG if debug_mode else numeric_level)
    console_handler.setFormatter(console_formatter)
    root_logger.addHandler(console_handler)

    # Reduce noise from external libraries (unless debug mode)
    if not debug_mode:
        for logger_name in ['httpx', 'httpcore', 'asyncio']:
            logging.getLogger(logger_name).setLevel(logging.WARNING)

    if debug_mode:
        logging.info("🐛 DEBUG MODE ENABLED - Detailed logging active")
    else:
        logging.info(f"📋 Console log level: {log_level}")
        logging.info(f"📁 File log level: DEBUG ({log_file})")


def parse_arguments(argv=None) -> argparse.Namespace:
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(
        description="EGLD AI Price Predictor",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python main.py                          # Start the interactive predictor
    python main.py --once                   # Print the current price and exit
    python main.py --interval 10 --timeout 5
        """
    )

    parser.add_argument(
        "--once",
        action="store_true",
        help="Fetch the current price once, print it and exit (status 1 if unavailable)"
    )

    parser.add_argument(
        "--interval",
        type=float,
        default=None,
        help="Seconds between price requests (default: POLL_INTERVAL, 30)"
    )

    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="HTTP request timeout in seconds (default: REQUEST_TIMEOUT, 10)"
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Set console logging level (default: LOG_LEVEL, WARNING)"
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable full debug mode with detailed tracebacks and console-only logging"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"EGLD AI Price Predictor v{__version__}"
    )

    args = parser.parse_args(argv)
    if args.interval is not None and args.interval <= 0:
        parser.error("--interval must be positive")
    if args.timeout is not None and args.timeout <= 0:
        parser.error("--timeout must be positive")
    return args


def apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    """Command line flags win over environment settings"""
    updates = {}
    if args.interval is not None:
        updates["POLL_INTERVAL"] = args.interval
    if args.timeout is not None:
        updates["REQUEST_TIMEOUT"] = args.timeout
    if args.log_level is not None:
        updates["LOG_LEVEL"] = args.log_level
    return settings.model_copy(update=updates) if updates else settings


async def main(argv=None) -> int:
    """Main application entry point"""
    args = parse_arguments(argv)
    settings = apply_overrides(get_settings(), args)

    final_log_level = "DEBUG" if args.debug else settings.LOG_LEVEL
    setup_logging(final_log_level, debug_mode=args.debug, log_file=settings.LOG_FILE)
    logger = logging.getLogger("main")

    logger.info("=" * 60)
    logger.info(f"🚀 {settings.BANNER_TITLE} v{__version__}")
    logger.info(f"   📡 Feed: {settings.PRICE_API_URL} ({settings.ASSET_ID}/{settings.VS_CURRENCY})")
    logger.info(f"   🔄 Poll Interval: {settings.POLL_INTERVAL:g}s")
    logger.info(f"   ⏱️ Request Timeout: {settings.REQUEST_TIMEOUT:g}s")
    logger.info("=" * 60)

    if args.once:
        try:
            sample = await fetch_once(settings)
        except FeedUnavailable as e:
            logger.error(f"❌ {e}")
            ConsoleUI(settings).print_error(f"Could not fetch {settings.ASSET_SYMBOL} price.")
            return 1
        print(f"{settings.ASSET_SYMBOL} {format_usd(sample.value)} (Last updated: {format_time(sample.observed_at)})")
        return 0

    app = PredictorApp(settings)
    try:
        await app.run()
        return 0
    except Exception as e:
        if args.debug:
            logger.error(f"❌ FATAL ERROR: {e}")
            logger.error(f"❌ Error Type: {type(e).__name__}")
            traceback.print_exc()
        else:
            logger.error(f"❌ Fatal error in main application: {e}", exc_info=True)
        return 1


def run():
    """Console script entry point"""
    try:
        exit_code = asyncio.run(main())
    except KeyboardInterrupt:
        print("\n🛑 Interrupted by user")
        exit_code = 0
    sys.exit(exit_code)


if __name__ == "__main__":
    run()
