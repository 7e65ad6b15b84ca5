"""CLI-level smoke tests."""
from tarot_patience.cli import _cmd_simulate, format_board, main
from tarot_patience.engine import new_game


class _Args:
    def __init__(self, **kwargs):
        self.__dict__.update(kwargs)


def test_format_board_hides_face_down_cards():
    text = format_board(new_game(seed=4))
    lines = text.splitlines()
    assert lines[0].startswith("col 0: ")
    assert "--" in lines[5]
    assert "stock: 42" in text


def test_cli_deal(capsys):
    main(["deal", "--seed", "4", "--moves"])
    out = capsys.readouterr().out
    assert out.startswith(format_board(new_game(seed=4)))


def test_cli_simulate_runs_games(capsys):
    args = _Args(
        agent="greedy",
        games=2,
        seed=0,
        max_steps=100,
        permissive=False,
        check=True,
    )

    _cmd_simulate(args)

    out = capsys.readouterr().out
    assert "[seed 0]" in out
    assert "[seed 1]" in out
    assert "greedy: wins=" in out
