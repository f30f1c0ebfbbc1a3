# tests/test_console_connector.py

from __future__ import annotations

import asyncio

import pytest

from todo_sync.connectors.console_connector import read_line


@pytest.mark.asyncio
async def test_read_line_does_not_block_the_loop() -> None:
    ticks: list[int] = []
    release = asyncio.Event()
    loop = asyncio.get_running_loop()

    def reader(prompt: str) -> str:
        # Blocks its own thread until the loop has made progress.
        asyncio.run_coroutine_threadsafe(release.wait(), loop).result(timeout=5)
        return f"{prompt}typed"

    async def ticker() -> None:
        for i in range(3):
            ticks.append(i)
            await asyncio.sleep(0)
        release.set()

    line, _ = await asyncio.gather(read_line(">>> ", reader), ticker())

    assert line == ">>> typed"
    assert ticks == [0, 1, 2]


@pytest.mark.asyncio
async def test_read_line_reraises_eof() -> None:
    def reader(prompt: str) -> str:
        raise EOFError

    with pytest.raises(EOFError):
        await read_line(">>> ", reader)
