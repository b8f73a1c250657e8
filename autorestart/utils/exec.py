"""
Run external programs (the RCON client) without blocking the event loop.
"""

import asyncio


async def exec_command(
    command: str, *args: str, timeout: float | None = None
) -> str:
    """
    Execute a program with arguments and return its stdout.

    Args:
        command: Program to execute
        *args: Program arguments
        timeout: Seconds to wait before killing the program, None to wait
            forever

    Returns:
        Decoded stdout

    Raises:
        RuntimeError: If the program exits non-zero or times out
    """
    process = await asyncio.create_subprocess_exec(
        command,
        *args,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )

    try:
        stdout, stderr = await asyncio.wait_for(process.communicate(), timeout)
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        raise RuntimeError(f"Command timed out after {timeout}s: {command}")

    if process.returncode != 0:
        raise RuntimeError(
            f"Failed to exec command: {command} (exit {process.returncode})\n"
            f"{stderr.decode(errors='replace')}"
        )
    return stdout.decode(errors="replace")
