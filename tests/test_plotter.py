import pytest
from matplotlib.colors import to_hex

from calcplot.backend.theme import DARK, PALETTES
from calcplot.frontend.plotter import PLOT_SCALE, GraphPlotter, grid_offsets


@pytest.fixture
def plotter(engine, theme):
    return GraphPlotter(engine, theme, width=400, height=300)


def test_grid_offsets_go_both_ways_from_origin():
    offsets = grid_offsets(200, 400, PLOT_SCALE)
    assert len(offsets) == 18
    assert offsets[:2] == [240, 160]
    assert 40 in offsets and 360 in offsets


def test_line_is_one_segment_across_the_canvas(plotter):
    segments = plotter.sample_path("x")
    assert len(segments) == 1
    path = segments[0]
    assert path.shape == (400, 2)
    # x = -5 at the left edge, so py = 150 + 5 * 40
    assert path[0].tolist() == [0.0, 350.0]
    assert path[200].tolist() == [200.0, 150.0]


def test_reciprocal_is_not_joined_across_zero(plotter):
    segments = plotter.sample_path("1/x")
    assert len(segments) == 2
    for segment in segments:
        px = segment[:, 0]
        assert (px < 200).all() or (px > 200).all()


def test_undefined_region_is_skipped(plotter):
    segments = plotter.sample_path("sqrt(x)")
    assert len(segments) == 1
    assert segments[0][0].tolist() == [200.0, 150.0]


def test_garbage_formula_draws_nothing(plotter):
    assert plotter.sample_path("x +") == []


def test_empty_formula_draws_only_grid_and_axes(plotter):
    assert plotter.draw("   ") == []
    assert len(plotter.ax.lines) == 2
    assert len(plotter.ax.collections) == 2


def test_draw_adds_one_line_per_segment(plotter):
    segments = plotter.draw("1/x")
    assert len(plotter.ax.lines) == 2 + len(segments)


def test_redraw_keeps_formula_and_uses_theme_colours(plotter, theme):
    plotter.draw("x^2")
    theme.change(DARK)
    plotter.draw()
    colors = PALETTES[DARK]
    assert to_hex(plotter.fig.get_facecolor()) == colors["background"].lower()
    curve = plotter.ax.lines[-1]
    assert to_hex(curve.get_color()) == colors["function"].lower()


def test_export_png(plotter, tmp_path):
    plotter.draw("sin(x)")
    path = tmp_path / "plot.png"
    plotter.export_png(str(path))
    assert path.read_bytes()[:8] == b"\x89PNG\r\n\x1a\n"


def test_implicit_multiplication_formula_plots(plotter):
    segments = plotter.sample_path("2x + 1")
    assert len(segments) == 1
    # x = 0 at the centre column, so y = 1 and py = 150 - 40
    assert segments[0][200].tolist() == [200.0, 110.0]


def test_pathological_formula_draws_nothing(plotter):
    assert plotter.draw("-" * 5000 + "x") == []
    assert len(plotter.ax.lines) == 2


def test_theme_change_redraws_followed_plot(plotter, theme):
    redraws = []
    plotter.follow_theme(on_redraw=lambda: redraws.append(theme.theme))
    plotter.draw("x")
    theme.change(DARK)
    assert redraws == [DARK]
    assert to_hex(plotter.fig.get_facecolor()) == PALETTES[DARK]["background"].lower()
    assert to_hex(plotter.ax.lines[-1].get_color()) == PALETTES[DARK]["function"].lower()
    assert len(plotter.ax.lines) == 3
