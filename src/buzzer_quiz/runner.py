"""
buzzer_quiz.runner — Console event loop
=======================================

GameRunner reads lines from stdin on the asyncio event loop. Every
character of a line is delivered as one key press; lines starting
with ':' are operator commands:

    :start   start the game
    :pause   pause or resume everything
    :skip    skip the present clue
    :reset   back to idle after the game ended
    :status  print the scores
    :quit    leave
"""

from __future__ import annotations
import asyncio
import logging
import sys
from typing import Optional, TextIO

from .errors import BuzzerQuizError
from .game import QuizGame

logger = logging.getLogger("buzzer_quiz.runner")


class GameRunner:
    """Drives a QuizGame from a line-oriented text stream."""

    def __init__(self, game: QuizGame, input_stream: Optional[TextIO] = None):
        self.game = game
        self.fatal_error: Optional[BaseException] = None
        self._input = input_stream or sys.stdin
        self._running = False
        self._stopped: Optional[asyncio.Event] = None
        self._commands = {
            ":start": lambda: self.game.trigger("startGame"),
            ":pause": self.game.toggle_paused,
            ":skip": lambda: self.game.trigger("skipClue"),
            ":reset": lambda: self.game.trigger("reset"),
            ":status": self._show_status,
            ":quit": self.stop,
        }

    # ── Main loop ─────────────────────────────────────────────

    async def run(self) -> int:
        """
        Run until :quit, end of input or a fatal game error.

        Returns:
            Process exit code: 0 on a normal stop, 1 after a fatal error
        """
        loop = asyncio.get_running_loop()
        loop.set_exception_handler(self._handle_loop_exception)
        self._stopped = asyncio.Event()
        self._running = True

        self._log_startup()
        self.game.start()
        reader = await self._open_reader(loop)

        while self._running:
            line = await self._next_line(reader)
            if line is None:
                break
            try:
                self.handle_line(line)
            except BuzzerQuizError as e:
                self.fatal_error = e
                break

        logger.info("Runner stopped.")
        return 1 if self.fatal_error is not None else 0

    def stop(self) -> None:
        self._running = False
        if self._stopped is not None:
            self._stopped.set()

    def handle_line(self, line: str) -> None:
        """Deliver one line of operator input."""
        text = line.rstrip("\r\n")
        command = text.strip().lower()
        if command.startswith(":"):
            action = self._commands.get(command)
            if action is None:
                logger.warning(f"Unknown command {command!r}; try {', '.join(self._commands)}")
                return
            action()
            return
        for key in text:
            self.game.press_key(key)

    # ── Helpers ───────────────────────────────────────────────

    def _log_startup(self) -> None:
        settings = self.game.settings
        logger.info("=" * 60)
        logger.info("  Buzzer Quiz — Starting")
        logger.info(f"  Teams:       {settings.team_count} (keys 1-{settings.team_count})")
        logger.info(f"  Buzz window: {settings.timeout_wait_for_buzzes_ms} ms")
        logger.info(f"  Game ends:   {settings.team_money_when_game_should_end} or "
                    f"{settings.game_time_limit_ms // 1000} s")
        logger.info("=" * 60)

    def _show_status(self) -> None:
        snapshot = self.game.snapshot()
        lines = [f"State: {snapshot.state_name}"]
        for team in snapshot.ranking():
            lines.append(f"  {team.name}: {team.money} ({team.state})")
        self.game.console.show_message("\n".join(lines))

    async def _open_reader(self, loop: asyncio.AbstractEventLoop) -> asyncio.StreamReader:
        reader = asyncio.StreamReader()
        protocol = asyncio.StreamReaderProtocol(reader)
        await loop.connect_read_pipe(lambda: protocol, self._input)
        return reader

    async def _next_line(self, reader: asyncio.StreamReader) -> Optional[str]:
        loop = asyncio.get_running_loop()
        read = loop.create_task(reader.readline())
        stopped = loop.create_task(self._stopped.wait())
        done, pending = await asyncio.wait({read, stopped}, return_when=asyncio.FIRST_COMPLETED)
        for task in pending:
            task.cancel()
        if read not in done:
            return None
        data = read.result()
        if not data:
            return None
        return data.decode("utf-8", errors="replace")

    def _handle_loop_exception(self, loop: asyncio.AbstractEventLoop, context: dict) -> None:
        exc = context.get("exception")
        if isinstance(exc, BuzzerQuizError):
            self.fatal_error = exc
            self.stop()
            return
        loop.default_exception_handler(context)
