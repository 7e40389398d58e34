"""Tmux client for subprocess-based tmux interaction."""

import asyncio

from ..errors import ExternalCommandError
from ..telemetry import get_logger, metrics, truncate_command
from .base import Multiplexer, SessionInfo, SplitAxis

logger = get_logger(__name__)

# Use tab as delimiter to avoid conflicts with colons in session names
_FIELD_SEP = "\t"


class TmuxClient(Multiplexer):
    """Client for interacting with tmux via subprocess commands.

    Provides async methods for:
    - Creating, renaming, killing and listing sessions
    - Splitting panes and capturing the new pane id
    - Sending keys to and selecting panes
    """

    def __init__(self, socket_path: str | None = None):
        """Initialize TmuxClient.

        Args:
            socket_path: Optional tmux socket path. If None, uses default socket.
        """
        self._socket_path = socket_path

    @property
    def name(self) -> str:
        return "tmux"

    def _build_cmd(self, args: tuple[str, ...]) -> list[str]:
        cmd = ["tmux"]
        if self._socket_path:
            cmd.extend(["-S", self._socket_path])
        cmd.extend(args)
        return cmd

    async def _exec(self, cmd: list[str]) -> tuple[int, str, str]:
        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            return 127, "", str(e)
        stdout, stderr = await proc.communicate()
        return proc.returncode, stdout.decode(), stderr.decode()

    async def run(self, *args: str) -> str | None:
        """Execute a tmux command, tolerating failure.

        Args:
            *args: Command arguments (e.g., "list-sessions", "-F", "...")

        Returns:
            Command stdout on success, None on failure.
        """
        cmd = self._build_cmd(args)
        returncode, stdout, stderr = await self._exec(cmd)
        metrics.inc("tmux.command", {"op": args[0]})

        if returncode != 0:
            logger.debug(f"tmux command failed: {' '.join(cmd)}: {stderr.strip()}")
            return None
        return stdout

    async def run_checked(self, *args: str) -> str:
        """Execute a tmux command that must succeed.

        Returns:
            Command stdout.

        Raises:
            ExternalCommandError: With tmux's stderr, verbatim.
        """
        cmd = self._build_cmd(args)
        returncode, stdout, stderr = await self._exec(cmd)
        metrics.inc("tmux.command", {"op": args[0]})

        if returncode != 0:
            message = stderr.strip() or f"exit status {returncode}"
            logger.warning(
                f"tmux command failed: {truncate_command(' '.join(cmd))}: {message}"
            )
            metrics.inc("tmux.error", {"op": args[0]})
            raise ExternalCommandError(cmd, message)
        return stdout

    async def create_session(self, name: str) -> None:
        await self.run_checked("new-session", "-ds", name)

    async def list_panes(self, session: str) -> list[str]:
        """List pane ids of a session (e.g. ["%0", "%1"])."""
        output = await self.run_checked("list-panes", "-t", session, "-F", "#{pane_id}")
        return [line.strip() for line in output.splitlines() if line.strip()]

    async def split_pane(
        self,
        parent: str,
        axis: SplitAxis,
        before: bool = False,
        percent: int | None = None,
    ) -> str:
        """Split a pane and return the new pane id.

        Args:
            parent: Pane id to split
            axis: VERTICAL for side-by-side (-h), HORIZONTAL for stacked (-v)
            before: Place the new pane left of / above the parent (-b)
            percent: Size of the new pane; omitted to let tmux halve the pane
        """
        args = ["split-window", "-t", parent]
        args.append("-h" if axis == SplitAxis.VERTICAL else "-v")
        if before:
            args.append("-b")
        if percent is not None:
            args.extend(["-p", str(percent)])
        # Print new pane id
        args.extend(["-P", "-F", "#{pane_id}"])

        output = await self.run_checked(*args)
        return output.strip()

    async def send_keys(self, handle: str, text: str) -> None:
        await self.run_checked("send-keys", "-t", handle, text, "C-m")

    async def select_pane(self, handle: str) -> None:
        await self.run_checked("select-pane", "-t", handle)

    async def kill_session(self, name: str) -> None:
        await self.run_checked("kill-session", "-t", name)

    async def kill_all_sessions(self) -> None:
        await self.run_checked("kill-server")

    async def rename_session(self, old: str, new: str) -> None:
        await self.run_checked("rename-session", "-t", old, new)

    async def list_sessions(self) -> list[SessionInfo]:
        """List all tmux sessions.

        Returns:
            SessionInfo list; empty when no server is running.
        """
        fmt = _FIELD_SEP.join([
            "#{session_name}", "#{session_windows}",
            "#{session_created}", "#{session_attached}",
        ])
        output = await self.run("list-sessions", "-F", fmt)

        if not output:
            return []

        sessions = []
        for line in output.strip().split("\n"):
            if not line:
                continue
            parts = line.split(_FIELD_SEP)
            if len(parts) < 4:
                logger.warning(f"Failed to parse session line: {line!r}")
                continue
            try:
                windows = int(parts[1])
            except ValueError:
                windows = 1
            try:
                created: int | None = int(parts[2])
            except ValueError:
                created = None
            sessions.append(
                SessionInfo(
                    name=parts[0],
                    windows=windows,
                    created=created,
                    attached=parts[3] not in ("", "0"),
                )
            )

        return sessions
