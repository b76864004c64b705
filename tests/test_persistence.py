import json

import pytest

from maze_router.errors import ErrorKind, MazeError
from maze_router.maze import parse_maze
from maze_router.persistence import dump_route, load_route, load_route_file, save_route
from maze_router.router import RouteFinder

SINGLE_CORRIDOR = "#e##\n#..#\n#.x#\n####\n"
ONE_BRANCH = "#e#\n...\n#x#\n"


def stepped(text: str, n: int) -> RouteFinder:
    rf = RouteFinder(parse_maze(text))
    for _ in range(n):
        rf.step()
    return rf


def corrupt(document) -> MazeError:
    with pytest.raises(MazeError) as info:
        load_route(document)
    assert info.value.kind == ErrorKind.CORRUPT_SNAPSHOT
    return info.value


def test_dump_finished_route():
    doc = dump_route(stepped(SINGLE_CORRIDOR, 4))
    assert doc == {
        "format_version": 1,
        "maze": ["#e##", "#..#", "#.x#", "####"],
        "flags": [".v..", ".vv.", "..v.", "...."],
        "path": [[1, 3], [1, 2], [2, 2], [2, 1]],
        "finished": True,
        "steps": 3,
    }


def test_dump_marks_dead_ends():
    doc = dump_route(stepped(ONE_BRANCH, 3))
    assert doc["flags"] == [".v.", ".vd", "..."]
    assert doc["path"] == [[1, 2], [1, 1]]


@pytest.mark.parametrize("n", [0, 1, 2, 3, 4, 5])
def test_round_trip_preserves_observable_state(n):
    original = stepped(ONE_BRANCH, n)
    restored = load_route(dump_route(original))
    assert restored.render() == original.render()
    assert restored.is_finished() == original.is_finished()
    assert restored.snapshot() == original.snapshot()
    # the two continue identically
    while not original.is_finished():
        assert restored.step() == original.step()
        assert restored.render() == original.render()
    assert restored.is_finished()


def test_restored_tiles_keep_navigability():
    original = stepped(ONE_BRANCH, 3)
    restored = load_route(dump_route(original))
    for (pos_a, a), (pos_b, b) in zip(original.maze.tiles(), restored.maze.tiles()):
        assert pos_a == pos_b
        assert a.is_navigable() == b.is_navigable()
        assert a.dead_end == b.dead_end


def test_restored_route_owns_its_maze():
    restored = load_route(dump_route(stepped(ONE_BRANCH, 1)))
    assert restored.route[0] is restored.maze.entrance


def test_dump_empty_route():
    rf = RouteFinder(parse_maze("#e#x"))
    with pytest.raises(MazeError):
        rf.step()
    with pytest.raises(MazeError) as info:
        dump_route(rf)
    assert info.value.kind == ErrorKind.EMPTY_ROUTE
    assert info.value.category == "persistence"


def test_save_and_load_file(tmp_path):
    path = tmp_path / "route.json"
    original = stepped(SINGLE_CORRIDOR, 2)
    original.save(path)
    restored = RouteFinder.load(path)
    assert restored.render() == original.render()
    assert not restored.is_finished()
    assert restored.solve() is True


def test_save_empty_route_writes_nothing(tmp_path):
    rf = RouteFinder(parse_maze("#e#x"))
    with pytest.raises(MazeError):
        rf.step()
    path = tmp_path / "route.json"
    with pytest.raises(MazeError) as info:
        save_route(rf, path)
    assert info.value.kind == ErrorKind.EMPTY_ROUTE
    assert not path.exists()


def test_save_to_unwritable_location(tmp_path):
    with pytest.raises(MazeError) as info:
        save_route(stepped(SINGLE_CORRIDOR, 1), tmp_path / "missing" / "route.json")
    assert info.value.kind == ErrorKind.STORAGE_UNAVAILABLE


def test_load_missing_file(tmp_path):
    with pytest.raises(MazeError) as info:
        load_route_file(tmp_path / "nope.json")
    assert info.value.kind == ErrorKind.STORAGE_UNAVAILABLE


def test_load_non_json_file(tmp_path):
    path = tmp_path / "route.json"
    path.write_text("not json at all", encoding="utf-8")
    with pytest.raises(MazeError) as info:
        load_route_file(path)
    assert info.value.kind == ErrorKind.CORRUPT_SNAPSHOT


def test_load_foreign_json(tmp_path):
    path = tmp_path / "route.json"
    path.write_text(json.dumps({"rows": 2, "cols": 2}), encoding="utf-8")
    with pytest.raises(MazeError) as info:
        load_route_file(path)
    assert info.value.kind == ErrorKind.CORRUPT_SNAPSHOT


def good_document() -> dict:
    return dump_route(stepped(ONE_BRANCH, 3))


def test_rejects_non_mapping():
    corrupt([1, 2, 3])


def test_rejects_unknown_version():
    doc = good_document()
    doc["format_version"] = 2
    corrupt(doc)


def test_rejects_invalid_maze():
    doc = good_document()
    doc["maze"] = ["#e#", "e..", "#x#"]
    corrupt(doc)


def test_rejects_flag_shape_mismatch():
    doc = good_document()
    doc["flags"] = doc["flags"][:2]
    corrupt(doc)


def test_rejects_unknown_flag():
    doc = good_document()
    doc["flags"][2] = "..?"
    corrupt(doc)


def test_rejects_route_not_starting_at_entrance():
    doc = good_document()
    doc["path"] = [[1, 1]]
    corrupt(doc)


def test_rejects_route_outside_maze():
    doc = good_document()
    doc["path"].append([9, 9])
    corrupt(doc)


def test_rejects_route_through_dead_end():
    doc = good_document()
    doc["path"].append([2, 1])
    corrupt(doc)


def test_rejects_empty_route():
    doc = good_document()
    doc["path"] = []
    corrupt(doc)


def test_rejects_false_finish():
    doc = good_document()
    doc["finished"] = True
    corrupt(doc)


def test_rejects_route_through_wall():
    doc = dump_route(stepped(ONE_BRANCH, 0))
    doc["path"] = [[1, 2], [0, 2]]
    corrupt(doc)


def test_rejects_disconnected_route():
    doc = dump_route(stepped(ONE_BRANCH, 0))
    doc["path"] = [[1, 2], [0, 1]]
    doc["flags"][0] = ".v."
    corrupt(doc)


def test_rejects_visited_wall():
    doc = good_document()
    doc["flags"][0] = "vv."
    err = corrupt(doc)
    assert "Wall" in str(err)
