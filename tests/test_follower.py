from __future__ import annotations

import io

import pytest
from rich.console import Console

from logfollow.config import load_config
from logfollow.follower import LogFollower


@pytest.fixture
def output() -> io.StringIO:
    return io.StringIO()


@pytest.mark.asyncio
async def test_watch_existing_starts_at_end(tmp_path, output, wait_until, write):
    (tmp_path / "sub").mkdir()
    old = tmp_path / "sub" / "app.log"
    old.write_text("old line\n")
    (tmp_path / "notes.txt").write_text("not tailed\n")
    config = load_config(
        root=tmp_path, pattern="*.log", watch_existing=True, wake_timeout=0.05
    )

    async with LogFollower(config, console=Console(file=output)) as follower:
        assert follower.service.registry.paths() == [str(old)]
        assert follower.watch_existing() == 0

        write(old, "new line\n")
        follower.service.file_changed(old)
        await wait_until(lambda: "app.log: new line" in output.getvalue())

    lines = output.getvalue().splitlines()
    assert lines[0] == "app.log:# created."
    assert "app.log: new line" in lines
    assert lines[-1] == "app.log:# stopped watching."
    assert "old line" not in output.getvalue()
    assert "not tailed" not in output.getvalue()


@pytest.mark.asyncio
async def test_existing_files_ignored_by_default(tmp_path, output):
    (tmp_path / "app.log").write_text("old line\n")
    config = load_config(root=tmp_path, pattern="*.log")

    async with LogFollower(config, console=Console(file=output)) as follower:
        assert len(follower.service.registry) == 0

    assert output.getvalue() == ""
