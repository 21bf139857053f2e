"""Main application entry point for voicecalc."""

import sys
import asyncio
import argparse
import logging
from pathlib import Path
from typing import Optional

from voicecalc import __version__
from voicecalc.models.session import SessionState
from voicecalc.scheduling import AsyncioScheduler
from voicecalc.services.calculator_service import VoiceCalculatorService
from voicecalc.transcription.script_backend import ScriptedSpeechBackend
from voicecalc.ui.console_presenter import ConsolePresenter

from .config import VoiceCalcConfig

logger = logging.getLogger(__name__)

POLL_INTERVAL_SECONDS = 0.05


class Server:

    def __init__(self, config_path: Optional[str], log_level: Optional[str] = None):
        # Load configuration
        self.config = VoiceCalcConfig(config_path)
        # Set up logging (override config with command line if specified)
        level = log_level or self.config.get('logging.level', 'INFO')
        setup_logging(self.config, level)
        self.presenter = ConsolePresenter()
        self.service: Optional[VoiceCalculatorService] = None

    async def run(self, script_path: str, auto_stop_minutes: Optional[int] = None) -> int:
        """Replay a script through a full listening session.

        Returns:
            Process exit code: 0 on success, 1 after a fatal session failure
        """
        scheduler = AsyncioScheduler()
        backend = ScriptedSpeechBackend.from_file(
            script_path,
            scheduler,
            step_delay=self.config.get('script.step_delay_seconds', 0.2),
            language=self.config.get('recognition.language', 'cmn-Hant-TW'),
            continuous=self.config.get('recognition.continuous', True),
            interim_results=self.config.get('recognition.interim_results', True),
        )
        self.service = VoiceCalculatorService(backend, scheduler, self.config)
        if auto_stop_minutes is not None:
            self.service.set_auto_stop_minutes(auto_stop_minutes)

        self.presenter.subscribe()
        try:
            self.service.start()
            while True:
                await asyncio.sleep(POLL_INTERVAL_SECONDS)
                if self.service.state is SessionState.IDLE:
                    logger.info("Session went idle on its own")
                    break
                if backend.exhausted and not self.service.accumulator.has_pending:
                    logger.info("Script finished; stopping session")
                    self.service.stop()
                    # Let the backend deliver its end event.
                    await asyncio.sleep(POLL_INTERVAL_SECONDS)
                    break
        finally:
            self.cleanup()

        return 1 if self.service.last_failure else 0

    def cleanup(self):
        if self.service is not None:
            if self.service.state is not SessionState.IDLE:
                self.service.stop()
            self.presenter.print_ledger(self.service.entries)
        self.presenter.unsubscribe()


def setup_logging(config, level: str = "INFO") -> None:

    """Set up logging configuration from YAML config."""
    log_file_path = config.get('logging.file_path')
    console_output = config.get('logging.console_output', True)

    # Set up handlers
    handlers = []

    # File handler - only when a log file is configured
    if log_file_path:
        log_dir = Path(log_file_path).parent
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file_path, encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'
        )
        file_handler.setFormatter(file_formatter)
        handlers.append(file_handler)

    # Console handler - only if enabled in config
    if console_output:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(logging.WARNING)  # Only show warnings and above on console
        console_formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        console_handler.setFormatter(console_formatter)
        handlers.append(console_handler)

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(getattr(logging, level.upper()))
    for handler in handlers:
        root_logger.addHandler(handler)

    # Log startup
    logger = logging.getLogger(__name__)
    logger.info("="*50)
    logger.info("voicecalc starting up")
    logger.info(f"Log file: {log_file_path or '(none)'}")
    logger.info(f"Log level set to: {level}")
    logger.info("="*50)


def main() -> None:
    """Main entry point for voicecalc."""
    parser = argparse.ArgumentParser(
        description="voicecalc - spoken amounts into a running ledger",
        epilog="Commands spoken in the transcript: 刪除 / delete, 總共 / 多少 / 結算 / 買單"
    )

    parser.add_argument(
        "--script",
        type=str,
        required=True,
        help="Path to a YAML script of speech backend events to replay"
    )

    parser.add_argument(
        "--config",
        type=str,
        help="Path to configuration YAML file (default: built-in settings)"
    )

    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Set logging level (default: from config, INFO)"
    )

    parser.add_argument(
        "--auto-stop-minutes",
        type=int,
        help="Minutes without speech before listening stops (overrides config)"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"voicecalc v{__version__}"
    )

    args = parser.parse_args()

    try:
        server = Server(args.config, args.log_level)
        exit_code = asyncio.run(server.run(args.script, args.auto_stop_minutes))
    except KeyboardInterrupt:
        print("\n👋 Goodbye!")
        exit_code = 0
    except Exception as e:
        print(f"❌ Error: {e}")
        logging.error(f"Application error: {e}")
        exit_code = 1
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
