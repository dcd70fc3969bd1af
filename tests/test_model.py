import pytest

from pictoboard.boards.canvas.model import Connection, Node, SceneModel


def _model_with(*positions):
    model = SceneModel()
    nodes = [model.add_node(f"p{i}.png", x, y) for i, (x, y) in enumerate(positions)]
    return model, nodes


def test_add_node_snaps_and_defaults():
    model = SceneModel()
    node = model.add_node("huis.png", 105, 112)

    assert (node.x, node.y) == (100, 120)
    assert (node.width, node.height) == (100, 100)
    assert node.type == "image"
    assert node.pinned is True
    assert model.nodes == [node]
    assert model.get_node(node.id) is node


def test_add_node_rejects_unknown_type():
    with pytest.raises(ValueError):
        SceneModel().add_node("x", 0, 0, "video")


def test_node_ids_are_unique():
    model = SceneModel()
    ids = {model.add_node("", 0, 0).id for _ in range(200)}
    assert len(ids) == 200


def test_connect_is_undirected_for_duplicates():
    model, (a, b) = _model_with((0, 0), (200, 0))

    first = model.connect(a.id, b.id)
    assert first is not None
    assert (first.from_id, first.to_id) == (a.id, b.id)

    assert model.connect(a.id, b.id) is None
    assert model.connect(b.id, a.id) is None
    assert len(model.connections) == 1
    assert model.has_connection(b.id, a.id)


def test_connect_rejects_self_and_unknown():
    model, (a,) = _model_with((0, 0))
    assert model.connect(a.id, a.id) is None
    assert model.connect(a.id, "node_missing") is None
    assert model.connections == []


def test_delete_node_cascades_only_its_connections():
    model, (a, b, c) = _model_with((0, 0), (200, 0), (400, 0))
    ab = model.connect(a.id, b.id)
    bc = model.connect(b.id, c.id)
    ac = model.connect(a.id, c.id)

    removed = model.delete_node(b.id)

    assert {conn.id for conn in removed} == {ab.id, bc.id}
    assert model.connections == [ac]
    assert [n.id for n in model.nodes] == [a.id, c.id]
    assert model.connections_for(a.id) == [ac]
    # 다시 연결 가능해야 한다
    assert model.connect(a.id, c.id) is None


def test_delete_unknown_ids_are_noops():
    model, (a, b) = _model_with((0, 0), (200, 0))
    model.connect(a.id, b.id)

    assert model.delete_node("nope") == []
    assert model.delete_connection("nope") is False
    assert len(model.nodes) == 2
    assert len(model.connections) == 1


def test_delete_connection_frees_pair():
    model, (a, b) = _model_with((0, 0), (200, 0))
    conn = model.connect(a.id, b.id)

    assert model.delete_connection(conn.id) is True
    assert model.connections == []
    assert model.connections_for(a.id) == []
    assert model.connect(b.id, a.id) is not None


def test_clear_empties_everything():
    model, (a, b) = _model_with((0, 0), (200, 0))
    model.connect(a.id, b.id)
    model.clear()

    assert model.nodes == []
    assert model.connections == []
    assert model.get_node(a.id) is None


def test_replace_drops_dangling_self_and_duplicate_connections():
    model = SceneModel()
    nodes = [Node("a", 0, 0), Node("b", 100, 0), Node("a", 500, 500)]
    connections = [
        Connection("c1", "a", "b"),
        Connection("c2", "b", "a"),        # 같은 쌍
        Connection("c3", "a", "ghost"),    # 끝점 없음
        Connection("c4", "b", "b"),        # 자기 자신
    ]

    model.replace(nodes, connections)

    assert [n.id for n in model.nodes] == ["a", "b"]
    assert model.get_node("a").x == 0
    assert [c.id for c in model.connections] == ["c1"]
    assert [c.id for c in model.connections_for("b")] == ["c1"]
