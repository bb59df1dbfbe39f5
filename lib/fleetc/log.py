"""Compile event logging."""

import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Tuple

import click

# action -> (icon, colour, level)
ACTIONS = {
    'created': ('✓', 'green', 'INFO'),
    'updated': ('✓', 'green', 'INFO'),
    'unchanged': ('=', None, 'INFO'),
    'removed': ('-', 'yellow', 'INFO'),
    'failed': ('❌', 'red', 'ERROR'),
}


class CompileLog:
    """Collects the events of one compile run.

    Every event is echoed to stderr so that stdout stays free for the zone
    file. When a log file is given, events are also appended to it.

    Example:
        log = CompileLog(log_file=root / 'compile.log')
        log.event('created', 'files/ssh/known_hosts')
    """

    def __init__(self, log_file: Optional[Path] = None, quiet: bool = False):
        self.log_file = log_file
        self.quiet = quiet
        self.events: List[Tuple[str, str]] = []

    def event(self, action: str, message: str) -> None:
        """Record an action (created, updated, failed, ...) on a target."""
        if action not in ACTIONS:
            raise ValueError(f"Unknown log action: {action}")
        self.events.append((action, message))

        icon, colour, level = ACTIONS[action]
        if not self.quiet:
            click.secho(f"{icon} {action} {message}", fg=colour, err=True)
        if self.log_file:
            self._append(level, f'{action} {message}')

    def actions(self, action: str) -> List[str]:
        """Messages recorded for one action."""
        return [message for act, message in self.events if act == action]

    def _append(self, level: str, message: str) -> None:
        timestamp = datetime.now().strftime('%Y-%m-%d %H:%M:%S')
        entry = f'[{timestamp}] {level}: {message}\n'
        try:
            self.log_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self.log_file, 'a') as f:
                f.write(entry)
        except (IOError, OSError) as e:
            print(f"Warning: Failed to log event: {e}", file=sys.stderr)
