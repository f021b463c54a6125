from __future__ import annotations

import stat

import pytest

from render_monitor.config import RunnerOptions

SAVED_LINE = "Saved: '/tmp/frames/{:04d}.png'"
TIME_LINE = " Time: 00:{:02d}.{:02d} (Saving: 00:00.09)"


@pytest.fixture
def options(tmp_path):
    """Options for a three-frame render (frames 1 through 3)."""
    return RunnerOptions(
        input_file=str(tmp_path / "scene.blend"),
        output_dir=str(tmp_path / "frames"),
        frame_start=1,
        frame_end=3,
    )


@pytest.fixture
def fake_blender(tmp_path):
    """Factory writing an executable stand-in for Blender.

    The script records its arguments to ``args.txt``, prints the given
    stdout lines, then runs ``tail`` (default ``exit 0``).
    """

    def _make(lines: list[str], tail: str = "exit 0") -> str:
        script = tmp_path / "blender"
        body = "\n".join(lines)
        script.write_text(
            "#!/bin/sh\n"
            f"printf '%s\\n' \"$@\" > '{tmp_path / 'args.txt'}'\n"
            "cat <<'RENDER_OUTPUT'\n"
            f"{body}\n"
            "RENDER_OUTPUT\n"
            f"{tail}\n"
        )
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return str(script)

    return _make


def render_output(frames: list[int], seconds: int = 2) -> list[str]:
    """Realistic Blender stdout for rendering ``frames`` one after another."""
    lines = []
    for frame in frames:
        lines.append(
            f"Fra:{frame} Mem:16.36M (0.00M, Peak 16.37M) | Time:00:00.02 | "
            "Mem:0.00M, Peak:0.00M | Scene, RenderLayer | Synchronizing object | Cube"
        )
        lines.append(SAVED_LINE.format(frame))
        lines.append(TIME_LINE.format(seconds, frame))
        lines.append("")
    lines.append("Blender quit")
    return lines
