"""
process_execution.py
====================
Timeout enforcement for spawned JDK tools.
"""

from __future__ import annotations

import logging
import subprocess
from typing import List

import psutil

logger = logging.getLogger(__name__)


class ToolTimeoutError(RuntimeError):
    """A JDK tool did not finish within its timeout and was killed."""

    def __init__(self, tool_name: str, timeout: float) -> None:
        super().__init__(f"{tool_name} process timed out after {timeout:g} seconds")
        self.tool_name = tool_name
        self.timeout = timeout


def kill_process_tree(pid: int, wait_timeout: float = 5.0) -> None:
    """Kill a process and all of its children, children first."""
    try:
        parent = psutil.Process(pid)
        children: List[psutil.Process] = parent.children(recursive=True)
        for child in children:
            try:
                child.kill()
            except psutil.NoSuchProcess:
                pass
        parent.kill()
        psutil.wait_procs([parent] + children, timeout=wait_timeout)
        logger.debug("Process tree %d killed", pid)
    except (psutil.NoSuchProcess, psutil.AccessDenied, ProcessLookupError):
        pass


def enforce_timeout(process: subprocess.Popen, timeout: float, tool_name: str) -> None:
    """
    Wait for ``process`` to finish within ``timeout`` seconds.

    A timeout of zero or less means no limit and returns immediately. On
    expiry the process tree is killed and ``ToolTimeoutError`` is raised.
    """
    if process is None:
        raise ValueError("process cannot be None")
    if not tool_name:
        raise ValueError("tool_name cannot be empty")
    if timeout <= 0:
        return

    try:
        process.wait(timeout=timeout)
    except subprocess.TimeoutExpired:
        logger.warning("%s timed out after %gs, killing", tool_name, timeout)
        kill_process_tree(process.pid)
        try:
            process.wait(timeout=5)
        except subprocess.TimeoutExpired:
            process.kill()
        raise ToolTimeoutError(tool_name, timeout) from None
