import pytest

from areameasure_core.calibration import CalibrationSnapshot
from areameasure_core.figures import Figure, FigureArena, RenderRole
from areameasure_core.labels import MessageCatalog
from areameasure_core.shapes import Shape, ShapeKind

MESSAGES = MessageCatalog()


def _figure(kind, points, finished=True, etalon=False):
    return Figure(Shape(kind, points, finished=finished), is_etalon=etalon)


def test_stale_handle_resolves_to_none():
    arena = FigureArena()
    first = arena.insert(_figure(ShapeKind.SEGMENT, [(0, 0), (1, 0)]))
    arena.remove(first)
    second = arena.insert(_figure(ShapeKind.SEGMENT, [(0, 0), (2, 0)]))
    assert second.index == first.index
    assert arena.get(first) is None
    assert first not in arena
    assert arena.get(second) is not None


def test_items_keep_creation_order():
    arena = FigureArena()
    a = arena.insert(_figure(ShapeKind.SEGMENT, [(0, 0), (1, 0)]))
    b = arena.insert(_figure(ShapeKind.SEGMENT, [(0, 0), (2, 0)]))
    c = arena.insert(_figure(ShapeKind.SEGMENT, [(0, 0), (3, 0)]))
    arena.remove(b)
    d = arena.insert(_figure(ShapeKind.SEGMENT, [(0, 0), (4, 0)]))
    assert [handle for handle, _ in arena.items()] == [a, c, d]
    assert len(arena) == 3


def test_removing_twice_is_harmless():
    arena = FigureArena()
    handle = arena.insert(_figure(ShapeKind.SEGMENT, [(0, 0), (1, 0)]))
    assert arena.remove(handle) is not None
    assert arena.remove(handle) is None


def test_real_size_needs_calibration():
    figure = _figure(ShapeKind.SEGMENT, [(0, 0), (40, 0)])
    assert figure.real_size(CalibrationSnapshot()) is None
    assert figure.real_size(CalibrationSnapshot(0.05)) == pytest.approx(2.0)


def test_real_size_does_not_depend_on_zoom():
    figure = _figure(ShapeKind.RECTANGLE, [(0, 0), (20, 20)])
    assert figure.real_size(CalibrationSnapshot(0.05, 1.0)) == pytest.approx(figure.real_size(CalibrationSnapshot(0.05, 4.0)))


def test_invalid_polygon_has_no_size_but_a_warning():
    figure = _figure(ShapeKind.POLYGON, [(0, 0), (10, 10), (10, 0), (0, 10)])
    snap = CalibrationSnapshot(1.0)
    assert figure.real_size(snap) is None
    assert figure.label_text(snap, MESSAGES) == ""
    assert figure.status_text(snap, MESSAGES) == "Polygon must not self-intersect!"
    assert figure.render_role() is RenderRole.ERROR


def test_etalon_label_carries_tag():
    figure = _figure(ShapeKind.SEGMENT, [(0, 0), (100, 0)], etalon=True)
    snap = CalibrationSnapshot(0.05)
    assert figure.label_text(snap, MESSAGES) == "5 m [etalon]"
    assert figure.status_text(snap, MESSAGES) == "Etalon length: 5 m"


def test_area_status_uses_square_unit():
    figure = _figure(ShapeKind.RECTANGLE, [(0, 0), (20, 20)])
    assert figure.status_text(CalibrationSnapshot(0.05), MESSAGES) == "Area: 1 m²"


def test_label_anchor_is_topmost_vertex_unless_pinned():
    figure = _figure(ShapeKind.POLYGON, [(5, 10), (8, 2), (0, 2)])
    assert figure.label_anchor() == (0.0, 2.0)
    figure.pin_label((50, 60))
    assert figure.label_anchor() == (50.0, 60.0)


def test_unfinished_figure_previews_cursor():
    figure = _figure(ShapeKind.POLYLINE, [(0, 0), (10, 0)], finished=False, etalon=True)
    assert figure.render_role((10, 10)) is RenderRole.ETALON_ACTIVE
    assert figure.display_points(2.0, (10, 10)) == [(0.0, 0.0), (20.0, 0.0), (20.0, 20.0)]
    assert figure.real_size(CalibrationSnapshot(1.0), (10, 10)) == pytest.approx(20.0)


def test_render_roles_of_finished_figures():
    assert _figure(ShapeKind.SEGMENT, [(0, 0), (1, 0)]).render_role() is RenderRole.STATIC
    assert _figure(ShapeKind.SEGMENT, [(0, 0), (1, 0)], etalon=True).render_role() is RenderRole.ETALON_STATIC
