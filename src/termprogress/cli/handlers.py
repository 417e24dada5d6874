"""
CLI command handlers for termprogress.

This module contains the demonstrations run by ``termprogress demo``,
separated from the argument parsing logic.
"""

import asyncio
import random
import sys
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Dict, Iterable, Tuple

from .commands import DEMO_NAMES
from ..config import load_config, ConfigurationError, ProgressConfig
from ..core.session import ProgressSession, ProgressSessionBuilder
from ..integration import with_progress, with_progress_and_state, with_spinner
from ..ui.effects import Colors
from ..ui.terminal import Terminal, get_terminal
from ..utils import setup_logging, get_logger, log_config_info, log_performance


@dataclass
class DemoContext:
    """Shared settings for one demonstration run."""
    config: ProgressConfig
    terminal: Terminal
    silent: bool = False
    delay_scale: float = 1.0
    rng: random.Random = field(default_factory=random.Random)

    @property
    def colors(self) -> Colors:
        return Colors(self.config.use_colors and self.terminal.supports_color)

    async def sleep(self, seconds: float) -> None:
        await asyncio.sleep(seconds * self.delay_scale)

    def session(self, total: float, description: str) -> ProgressSession:
        if self.silent:
            return ProgressSession.create_silent(total, description, config=self.config,
                                                 terminal=self.terminal)
        return ProgressSession.create_console(total, description, self.config,
                                              terminal=self.terminal)

    def spinner(self, description: str) -> ProgressSession:
        if self.silent:
            return ProgressSessionBuilder(self.config).with_description(description) \
                .for_spinner().with_session_options(terminal=self.terminal).build_silent()
        return ProgressSession.create_spinner(description, self.config, terminal=self.terminal)

    def header(self, text: str) -> None:
        self.terminal.write_line(self.colors.info(text))


def handle_cli_command(args) -> int:
    """
    Handle CLI commands based on parsed arguments.

    Returns:
        int: Exit code (0 for success, non-zero for error)
    """
    try:
        config = load_config(getattr(args, "config", None))
        setup_logging(config, verbose=getattr(args, "verbose", False))
        log_config_info(config)
        logger = get_logger(__name__)

        names = getattr(args, "only", None) or list(DEMO_NAMES)
        context = DemoContext(
            config=config.progress,
            terminal=get_terminal(),
            silent=getattr(args, "silent", False),
            delay_scale=0.0 if getattr(args, "fast", False) else 1.0,
        )
        logger.debug(f"Running demonstrations: {', '.join(names)}")
        return asyncio.run(run_demos(context, names))

    except ConfigurationError as e:
        print(f"❌ Configuration error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"❌ Unexpected error: {e}", file=sys.stderr)
        return 1


async def run_demos(context: DemoContext, names: Iterable[str]) -> int:
    """Run the named demonstrations in their canonical order."""
    selected = set(names)
    context.terminal.write_line(context.colors.bright("=== CLI Progress Bar System Demo ===\n"))

    for number, name in enumerate(DEMO_NAMES, start=1):
        if name not in selected:
            continue
        title, demo = DEMOS[name]
        context.header(f"\n{number}. {title}:")
        with log_performance(f"demo {name}"):
            await demo(context)

    context.terminal.write_line(context.colors.success("\n✓ All demonstrations completed!"))
    return 0


async def simulate_work(context: DemoContext, session: ProgressSession,
                        total: int, delay: float = 0.05) -> None:
    """Advance ``session`` in random steps of one to five units."""
    completed = 0
    while completed < total:
        increment = min(context.rng.randint(1, 5), total - completed)
        session.update(increment)
        completed += increment
        await context.sleep(delay + context.rng.random() * 0.05)


async def _demo_basic(context: DemoContext) -> None:
    bar = context.session(100, "Processing files").start()
    await simulate_work(context, bar, 100, 0.05)
    await context.sleep(0.5)


async def _demo_custom(context: DemoContext) -> None:
    builder = (ProgressSessionBuilder(context.config)
               .with_total(50)
               .with_description("Custom Processing")
               .with_bar_length(30)
               .with_chars("▓", "▒")
               .with_precision(0)
               .show_speed(True)
               .with_session_options(terminal=context.terminal))
    bar = (builder.build_silent() if context.silent else builder.build()).start()
    await simulate_work(context, bar, 50, 0.075)
    await context.sleep(0.5)


async def _demo_spinner(context: DemoContext) -> None:
    await with_spinner("Connecting to server", lambda: context.sleep(2.0),
                       session=context.spinner("Connecting to server"))


async def _demo_async(context: DemoContext) -> None:
    async def download(update):
        for _ in range(75):
            await context.sleep(0.03)
            update(1)

    await with_progress(75, "Downloading", download,
                        session=context.session(75, "Downloading"))


async def _demo_silent(context: DemoContext) -> None:
    bar = ProgressSession.create_silent(10, "Test Progress", config=context.config,
                                        terminal=context.terminal)
    for _ in range(10):
        bar.update(1)

    context.terminal.write_line(f"Final progress: {bar.get_progress().to_dict()}")
    context.terminal.write_line(f"History length: {len(bar.renderer.get_history())}")


async def _demo_state(context: DemoContext) -> None:
    async def work(update):
        for _ in range(20):
            await context.sleep(0.05)
            update(1)
        return "completed successfully"

    result, state_history = await with_progress_and_state(
        20, "State Tracking Demo", work,
        session=context.session(20, "State Tracking Demo"),
    )
    context.terminal.write_line(f"Result: {result}")
    context.terminal.write_line(f"State changes: {len(state_history)}")


DEMOS: Dict[str, Tuple[str, Callable[[DemoContext], Awaitable[None]]]] = {
    "basic": ("Basic Progress Bar", _demo_basic),
    "custom": ("Custom Styled Progress Bar", _demo_custom),
    "spinner": ("Spinner for Indeterminate Progress", _demo_spinner),
    "async": ("Progress with Async Task", _demo_async),
    "silent": ("Silent Progress (CI mode)", _demo_silent),
    "state": ("Progress with State Tracking", _demo_state),
}
