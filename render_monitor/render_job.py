from __future__ import annotations

import asyncio
import logging

from render_monitor.channel import EventChannel
from render_monitor.config import DEFAULT_BLENDER_COMMAND, RunnerOptions
from render_monitor.errors import RenderMonitorError, SpawnFailure, SubprocessFailure
from render_monitor.events import Failure, Finished, RunOutcome, Started, Success
from render_monitor.log_setup import TRACE
from render_monitor.parsing.correlator import FrameCorrelator
from render_monitor.parsing.line_classifier import classify_line

logger = logging.getLogger(__name__)

# The classifier only recognises ".png" saves
RENDER_FORMAT = "PNG"


class RenderJob:
    """Owns one headless Blender animation render from spawn to exit status.

    Spawns Blender with stdout piped (stderr is inherited and never read),
    feeds every stdout line through the classifier and the frame
    correlator, and publishes the resulting domain events on an
    :class:`EventChannel`. Every fatal condition is turned into a
    :class:`Failure` outcome which is handed over when the channel closes.
    """

    def __init__(
        self,
        options: RunnerOptions,
        command: str = DEFAULT_BLENDER_COMMAND,
        strict_correlation: bool = True,
    ) -> None:
        """Initialize a RenderJob without spawning it.

        Args:
            options: Input file, output directory and frame range.
            command: Path to the Blender executable.
            strict_correlation: Treat a timing line with no saved frame
                as fatal instead of dropping it.
        """
        self._options = options
        self._command = command
        self._correlator = FrameCorrelator(strict=strict_correlation)
        self._process: asyncio.subprocess.Process | None = None

    def arguments(self) -> list[str]:
        """Build the Blender command-line arguments for this render."""
        return [
            "--background",
            self._options.input_file,
            "--render-output",
            self._options.output_dir,
            "--frame-start",
            str(self._options.frame_start),
            "--frame-end",
            str(self._options.frame_end),
            "--render-anim",
            "--render-format",
            RENDER_FORMAT,
            "--use-extension",
        ]

    async def spawn(self) -> None:
        """Start the Blender process with its stdout piped.

        Raises:
            SpawnFailure: If the executable is missing or cannot be run.
        """
        args = self.arguments()
        logger.debug("Spawning render: cmd=%s args=%s", self._command, args)
        try:
            self._process = await asyncio.create_subprocess_exec(
                self._command,
                *args,
                stdout=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            raise SpawnFailure(f"Failed to start {self._command}: {exc}") from exc
        logger.debug("Render process spawned pid=%d", self._process.pid)

    async def _read_line(self) -> bytes:
        """Accumulate stdout bytes up to and including the next newline.

        Lines longer than the stream buffer limit are collected piecewise.
        Returns the trailing partial line at EOF, or b"" once exhausted.
        """
        stdout = self._process.stdout
        chunks: list[bytes] = []
        while True:
            try:
                chunks.append(await stdout.readuntil(b"\n"))
                break
            except asyncio.LimitOverrunError as exc:
                chunks.append(await stdout.readexactly(exc.consumed))
            except asyncio.IncompleteReadError as exc:
                chunks.append(exc.partial)
                break
        return b"".join(chunks)

    async def _pump(self, channel: EventChannel) -> None:
        """Read stdout line by line until EOF, forwarding rendered frames."""
        while True:
            raw = await self._read_line()
            if not raw:
                break
            line = raw.decode("utf-8", errors="replace")
            logger.log(TRACE, "render stdout: %r", line)
            event = self._correlator.feed(classify_line(line))
            if event is not None:
                logger.debug(
                    "Frame %d rendered in %dms", event.frame_number, event.render_time_ms
                )
                channel.send(event)

    async def _reap(self) -> None:
        """Wait for exit and translate the status.

        Raises:
            SubprocessFailure: On a non-zero exit code or signal death.
        """
        returncode = await self._process.wait()
        if returncode < 0:
            raise SubprocessFailure(signal=-returncode)
        if returncode != 0:
            raise SubprocessFailure(exit_code=returncode)
        logger.info("Render process exited cleanly")

    async def _kill(self) -> None:
        """Stop a render whose output can no longer be trusted."""
        if self._process is None or self._process.returncode is not None:
            return
        logger.debug("Killing render process pid=%d", self._process.pid)
        try:
            self._process.kill()
        except ProcessLookupError:
            pass
        await self._process.wait()

    async def run(self, channel: EventChannel) -> RunOutcome:
        """Run the render to completion and close ``channel`` with the outcome.

        Emits ``Started`` right after a successful spawn, one
        ``RenderedFrame`` per correlated pair, and ``Finished`` only after
        the process exited with status 0. A spawn failure emits nothing.

        Returns:
            The same outcome that was handed to :meth:`EventChannel.close`.
        """
        outcome: RunOutcome = Failure("render job stopped unexpectedly")
        try:
            await self.spawn()
            channel.send(Started())
            try:
                await self._pump(channel)
            except (Exception, asyncio.CancelledError):
                await self._kill()
                raise
            await self._reap()
            channel.send(Finished())
            outcome = Success()
        except RenderMonitorError as exc:
            logger.debug("Render job failed: %s", exc)
            outcome = Failure(str(exc), exc)
        except Exception as exc:
            logger.debug("Render job crashed", exc_info=True)
            outcome = Failure(f"Unexpected error: {exc}")
        finally:
            channel.close(outcome)
        return outcome
