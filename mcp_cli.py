#!/usr/bin/env python3
"""
CLI for running the Google Maps MCP server in the background.
Provides start, stop, logs, and status commands for the HTTP transport.
"""

import argparse
import os
import signal
import subprocess
import sys
import time
from pathlib import Path

from rich.console import Console

from config import Config

console = Console()


class MapsServerCLI:
    def __init__(self):
        self.project_root = Path(__file__).parent
        self.logs_dir = self.project_root / Config.LOG_DIR
        self.log_file = self.logs_dir / "mcp_server.log"
        self.pid_file = self.logs_dir / "mcp_server.pid"
        self.logs_dir.mkdir(exist_ok=True)

    @property
    def server_url(self):
        return f"{Config.MCP_SERVER_URL}/mcp"

    def start_server(self):
        """Start the HTTP MCP server as a background process."""
        if self.is_server_running():
            console.print("Google Maps MCP server is already running")
            return
        if not Config.has_api_key():
            console.print("[bold red]GOOGLE_MAPS_API_KEY is not set; refusing to start[/bold red]")
            return

        console.print("Starting Google Maps MCP server...")
        cmd = [sys.executable, "-m", "mcp_server", "--transport", "http", "--daemon"]
        with open(self.log_file, "a") as log:
            process = subprocess.Popen(
                cmd,
                cwd=self.project_root,
                stdout=log,
                stderr=subprocess.STDOUT,
                start_new_session=True,
            )
        self.pid_file.write_text(str(process.pid))

        time.sleep(2)
        if self.is_server_running():
            console.print(f"[green]Server started (PID: {process.pid})[/green] at {self.server_url}")
            console.print(f"Logs: {self.log_file}")
        else:
            console.print("[bold red]Failed to start server, check the logs[/bold red]")

    def stop_server(self):
        """Stop the background server, escalating to SIGKILL after 5 seconds."""
        if not self.is_server_running():
            console.print("Google Maps MCP server is not running")
            return

        try:
            pid = self._read_pid()
            console.print(f"Stopping server (PID: {pid})...")
            os.killpg(os.getpgid(pid), signal.SIGTERM)

            for _ in range(10):
                if not self.is_server_running():
                    break
                time.sleep(0.5)

            if self.is_server_running():
                os.killpg(os.getpgid(pid), signal.SIGKILL)
                time.sleep(1)

            self.pid_file.unlink(missing_ok=True)
            console.print("Server stopped")
        except (FileNotFoundError, ProcessLookupError, ValueError):
            console.print("Could not stop server (PID file invalid or process not found)")
            self.pid_file.unlink(missing_ok=True)

    def show_logs(self, follow=True, lines=50):
        """Print the last lines of the server log, optionally following it."""
        if not self.log_file.exists():
            console.print("No log file found. Start the server first.")
            return

        with open(self.log_file, "r") as f:
            for line in f.readlines()[-lines:]:
                print(line.rstrip())
        if not follow:
            return

        console.print("[dim]Following log, Ctrl+C to stop[/dim]")
        try:
            with open(self.log_file, "r") as f:
                f.seek(0, 2)
                while True:
                    line = f.readline()
                    if line:
                        print(line.rstrip())
                    else:
                        time.sleep(0.1)
        except KeyboardInterrupt:
            console.print("\nStopped viewing logs")

    def show_status(self):
        if self.is_server_running():
            console.print(f"[green]Running[/green] (PID: {self._read_pid()}) at {self.server_url}")
            console.print(f"Log file: {self.log_file}")
        else:
            console.print("Google Maps MCP server is not running")

    def _read_pid(self):
        return int(self.pid_file.read_text().strip())

    def is_server_running(self):
        """Check the PID file against a live process, clearing stale files."""
        if not self.pid_file.exists():
            return False
        try:
            os.kill(self._read_pid(), 0)
            return True
        except (FileNotFoundError, ValueError, ProcessLookupError):
            self.pid_file.unlink(missing_ok=True)
            return False


def main():
    parser = argparse.ArgumentParser(description="Google Maps MCP server control")
    parser.add_argument(
        "command",
        choices=["start", "stop", "logs", "status"],
        help="Command to execute",
    )
    parser.add_argument(
        "--no-follow", action="store_true", help="Don't follow logs (for logs command)"
    )
    args = parser.parse_args()
    cli = MapsServerCLI()

    if args.command == "start":
        cli.start_server()
    elif args.command == "stop":
        cli.stop_server()
    elif args.command == "logs":
        cli.show_logs(follow=not args.no_follow)
    elif args.command == "status":
        cli.show_status()


if __name__ == "__main__":
    main()
