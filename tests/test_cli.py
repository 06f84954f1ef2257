import io
import json
import os
import subprocess
import sys
from pathlib import Path

import pytest

from neoncrosses.cli import main


SRC = Path(__file__).resolve().parents[1] / "src"


def _run_cli(args: list[str], cwd: Path, stats: Path, stdin: str = "") -> subprocess.CompletedProcess:
    exe = [sys.executable, "-m", "neoncrosses.cli", "--stats-file", str(stats)]
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(p for p in (str(SRC), env.get("PYTHONPATH", "")) if p)
    return subprocess.run(exe + args, cwd=cwd, capture_output=True, text=True, input=stdin, env=env)


def test_cli_evaluate_and_move(tmp_path: Path):
    stats = tmp_path / "stats.json"
    r = _run_cli(["evaluate", "--board", "XOXXOOOXX"], cwd=tmp_path, stats=stats)
    assert r.returncode == 0
    assert "outcome=DRAW" in r.stdout
    r = _run_cli(["evaluate", "--board", "XXXOO...."], cwd=tmp_path, stats=stats)
    assert r.returncode == 0
    assert "outcome=X line=[0, 1, 2]" in r.stdout
    r = _run_cli(["move", "--board", "XX.OO....", "--mark", "X", "--difficulty", "hard"], cwd=tmp_path, stats=stats)
    assert r.returncode == 0
    assert "move=2" in r.stdout


@pytest.mark.parametrize("bad", ["abc", "XX.OO", "XX.OO....X", "XX.OO...Z", "OO......."])
def test_cli_error_invalid_boards(tmp_path: Path, bad: str):
    stats = tmp_path / "stats.json"
    r = _run_cli(["evaluate", "--board", bad], cwd=tmp_path, stats=stats)
    assert r.returncode == 2
    r = _run_cli(["move", "--board", bad], cwd=tmp_path, stats=stats)
    assert r.returncode == 2


def test_main_move_and_evaluate_in_process(tmp_path: Path):
    out = io.StringIO()
    rc = main(["--stats-file", str(tmp_path / "s.json"), "move", "--board", "X.......O", "-d", "hard"], stdout=out)
    assert rc == 0
    assert out.getvalue().strip() == "move=4"
    out = io.StringIO()
    rc = main(["--stats-file", str(tmp_path / "s.json"), "evaluate", "--board", "X...O...."], stdout=out)
    assert rc == 0
    assert "outcome=IN_PROGRESS" in out.getvalue()


def test_play_records_stats_and_stats_command(tmp_path: Path):
    stats = tmp_path / "stats.json"
    # trying every cell in order always fills the board; the trailing answer declines a rematch
    moves = "".join(f"{i}\n" for i in range(9)) + "n\n"
    out = io.StringIO()
    rc = main(
        ["--stats-file", str(stats), "play", "-d", "hard", "--think-delay", "0"],
        stdin=io.StringIO(moves),
        stdout=out,
    )
    assert rc == 0
    text = out.getvalue()
    assert "IT'S A DRAW!" in text or "WINS!" in text

    out = io.StringIO()
    assert main(["--stats-file", str(stats), "stats", "--json"], stdout=out) == 0
    hard = json.loads(out.getvalue())["difficulties"]["hard"]
    assert hard["games_played"] == 1
    assert hard["wins"] + hard["losses"] + hard["draws"] == 1

    out = io.StringIO()
    assert main(["--stats-file", str(stats), "stats"], stdout=out) == 0
    text = out.getvalue()
    assert "Hard" in text and "1 played" in text
    assert "Overall" in text

    assert main(["--stats-file", str(stats), "stats", "--reset"], stdout=io.StringIO()) == 0
    out = io.StringIO()
    main(["--stats-file", str(stats), "stats", "--json"], stdout=out)
    assert json.loads(out.getvalue())["difficulties"]["hard"]["games_played"] == 0


def test_play_rejects_bad_input_and_quits(tmp_path: Path):
    stats = tmp_path / "stats.json"
    out = io.StringIO()
    rc = main(
        ["--stats-file", str(stats), "play", "-d", "easy", "--think-delay", "0", "--one-based"],
        stdin=io.StringIO("ten\n0\nq\n"),
        stdout=out,
    )
    assert rc == 0
    assert out.getvalue().count("Invalid move") == 2
    assert not stats.exists()


def test_play_no_stats(tmp_path: Path):
    stats = tmp_path / "stats.json"
    rc = main(
        ["--stats-file", str(stats), "play", "-d", "hard", "--think-delay", "0", "--no-stats"],
        stdin=io.StringIO("".join(f"{i}\n" for i in range(9))),
        stdout=io.StringIO(),
    )
    assert rc == 0
    assert not stats.exists()


def test_cli_benchmark(tmp_path: Path):
    stats = tmp_path / "stats.json"
    r = _run_cli(
        ["--seed", "7", "benchmark", "--x-tier", "hard", "--o-tier", "easy", "--games", "50",
         "--log-dir", str(tmp_path / "runs")],
        cwd=tmp_path,
        stats=stats,
    )
    assert r.returncode == 0
    assert "games=50" in r.stdout
    assert "x_win=" in r.stdout and "draw=" in r.stdout
    r = _run_cli(["benchmark", "--games", "0"], cwd=tmp_path, stats=stats)
    assert r.returncode == 2


@pytest.mark.parametrize("board", ["XXXOO....", "XOXXOOOXX", "OOOXX.X.."])
def test_move_on_finished_board_returns_no_move(tmp_path: Path, board: str):
    out = io.StringIO()
    rc = main(["--stats-file", str(tmp_path / "s.json"), "move", "--board", board, "-d", "hard"], stdout=out)
    assert rc == 0
    assert out.getvalue().strip() == "move=-1"


def test_unwritable_stats_file(tmp_path: Path):
    blocker = tmp_path / "afile"
    blocker.write_text("")
    stats = blocker / "stats.json"
    out = io.StringIO()
    rc = main(
        ["--stats-file", str(stats), "play", "-d", "easy", "--think-delay", "0"],
        stdin=io.StringIO("".join(f"{i}\n" for i in range(9)) + "n\n"),
        stdout=out,
    )
    assert rc == 0
    assert "WINS!" in out.getvalue() or "IT'S A DRAW!" in out.getvalue()

    assert main(["--stats-file", str(stats), "stats", "--reset"], stdout=io.StringIO()) == 2
