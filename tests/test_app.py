import pytest

from pulsar_sim.app import build_parser, hud_lines
from pulsar_sim.core.config import RENDER_CFG
from pulsar_sim.core.session import PulsarSession


def test_parser_defaults():
    args = build_parser().parse_args([])
    assert args.preset == "default"
    assert args.record is False
    assert args.width == RENDER_CFG.width
    assert args.fps == 60


def test_parser_rejects_unknown_preset():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["--preset", "crab"])


def test_hud_lines_report_period_and_radii():
    session = PulsarSession()
    frame = session.frame(0.0, 0.0)
    lines = [text for text, _ in hud_lines(session, frame, RENDER_CFG)]
    assert any(line.startswith("period") and "133.96" in line for line in lines)
    assert any(line.startswith("r_psr") and "3.636" in line for line in lines)


def test_viewport_leaves_room_for_panel():
    assert RENDER_CFG.viewport_size == (RENDER_CFG.width - RENDER_CFG.panel_width, RENDER_CFG.height)
