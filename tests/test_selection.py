import pytest

from areameasure_core.figures import Figure, FigureArena
from areameasure_core.selection import EMPTY_SELECTION, Locus, find_selection, score
from areameasure_core.settings import SelectionRadii
from areameasure_core.shapes import Shape, ShapeKind


def _arena(*shapes):
    arena = FigureArena()
    handles = [arena.insert(Figure(shape)) for shape in shapes]
    return arena, handles


def _segment(a, b):
    return Shape(ShapeKind.SEGMENT, [a, b], finished=True)


def test_score_is_clamped_at_zero():
    assert score(3.0, 8.0) == 5.0
    assert score(9.0, 8.0) == 0.0


def test_cursor_near_body_selects_body():
    arena, (handle,) = _arena(_segment((0, 0), (100, 0)))
    hit = find_selection((50, 3), arena.items())
    assert hit.handle == handle
    assert hit.locus is Locus.BODY


def test_vertex_beats_body_when_closer_in_score():
    arena, (handle,) = _arena(_segment((0, 0), (100, 0)))
    hit = find_selection((1, 1), arena.items())
    assert hit.handle == handle
    assert hit.locus is Locus.VERTEX
    assert hit.vertex_index == 0
    assert hit.is_draggable()


def test_ties_go_to_the_first_figure():
    arena, (first, _second) = _arena(_segment((0, 0), (100, 0)), _segment((0, 0), (100, 0)))
    assert find_selection((50, 3), arena.items()).handle == first


def test_inside_polygon_selects_body():
    square = Shape(ShapeKind.POLYGON, [(0, 0), (10, 0), (10, 10), (0, 10)], finished=True)
    arena, (handle,) = _arena(square)
    hit = find_selection((5, 5), arena.items())
    assert hit == find_selection((5, 5), arena.items())
    assert hit.handle == handle
    assert hit.locus is Locus.BODY


def test_far_cursor_selects_nothing():
    arena, _ = _arena(_segment((0, 0), (100, 0)))
    assert find_selection((500, 500), arena.items()) == EMPTY_SELECTION
    assert EMPTY_SELECTION.is_empty


def test_unfinished_figures_are_not_candidates():
    arena, _ = _arena(Shape(ShapeKind.POLYLINE, [(0, 0), (100, 0)]))
    assert find_selection((50, 0), arena.items()).is_empty


def test_label_box_is_a_candidate():
    arena, (handle,) = _arena(_segment((0, 0), (10, 0)))
    hit = find_selection((210, 205), arena.items(), label_boxes={handle: (200, 200, 50, 14)})
    assert hit.handle == handle
    assert hit.locus is Locus.LABEL


def test_hit_testing_uses_display_coordinates():
    arena, (handle,) = _arena(_segment((0, 0), (100, 0)))
    assert find_selection((150, 3), arena.items(), scale=2.0).handle == handle
    assert find_selection((150, 3), arena.items(), scale=1.0).is_empty


def test_custom_radii():
    arena, (handle,) = _arena(_segment((0, 0), (100, 0)))
    radii = SelectionRadii(polyline=20.0)
    assert find_selection((50, 15), arena.items()).is_empty
    assert find_selection((50, 15), arena.items(), radii=radii).handle == handle


@pytest.mark.parametrize("cursor, index", [((0, 1), 0), ((10, 1), 1), ((10, 9), 2), ((0, 9), 3)])
def test_rectangle_corners_are_selectable(cursor, index):
    rect = Shape(ShapeKind.RECTANGLE, [(0, 0), (10, 10)], finished=True)
    arena, _ = _arena(rect)
    hit = find_selection(cursor, arena.items())
    assert hit.locus is Locus.VERTEX
    assert hit.vertex_index == index


def test_cursor_exactly_on_segment_vertex():
    arena, (handle,) = _arena(_segment((0, 0), (100, 0)))
    hit = find_selection((100, 0), arena.items())
    assert hit == find_selection((100, 0), arena.items())
    assert hit.handle == handle
    assert hit.locus is Locus.VERTEX
    assert hit.vertex_index == 1


def test_cursor_exactly_on_polygon_vertex():
    square = Shape(ShapeKind.POLYGON, [(0, 0), (10, 0), (10, 10), (0, 10)], finished=True)
    arena, (handle,) = _arena(square)
    hit = find_selection((10, 10), arena.items())
    assert hit.handle == handle
    assert hit.locus is Locus.VERTEX
    assert hit.vertex_index == 2
