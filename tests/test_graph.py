from rmtoolkit.graph import Graph
from rmtoolkit.protocol import GraphConfig, GraphOperation, GraphType


def _decode_num(config):
    return config.radius | config.end_x << 10 | config.end_y << 21


def test_set_content_sets_end_angle_to_length():
    graph = Graph(GraphConfig(graphic_type=GraphType.STRING), title="mode:")
    graph.set_content("follow")
    assert graph.characters() == "mode:follow"
    assert graph.config.end_angle == len("mode:follow")


def test_empty_text_keeps_end_angle():
    graph = Graph(GraphConfig(end_angle=90))
    graph.set_content("")
    assert graph.config.end_angle == 90


def test_constructor_content_applied():
    graph = Graph(title="a", content="bc")
    assert graph.config.end_angle == 3


def test_set_int_num_round_trip():
    graph = Graph()
    graph.set_int_num(123456789)
    assert _decode_num(graph.config) == 123456789


def test_set_int_num_negative_fills_fields():
    graph = Graph()
    graph.set_int_num(-1)
    assert graph.config.radius == 1023
    assert graph.config.end_x == 2047
    assert graph.config.end_y == 2047


def test_set_float_num_thousandths():
    graph = Graph()
    graph.set_float_num(1.5)
    assert _decode_num(graph.config) == 1500


def test_angles_out_of_range_ignored():
    graph = Graph()
    graph.set_start_angle(45)
    graph.set_start_angle(361)
    graph.set_end_angle(360)
    graph.set_end_angle(-1)
    assert graph.config.start_angle == 45
    assert graph.config.end_angle == 360


def test_repeated_tracking():
    graph = Graph(GraphConfig(graphic_id=b"abc", operate_type=GraphOperation.ADD))
    assert not graph.is_repeated()
    graph.update_last_config()
    assert graph.is_repeated()
    graph.config.color = 3
    assert not graph.is_repeated()
    graph.update_last_config()
    graph.set_content("x")
    assert not graph.is_repeated()


def test_fresh_default_graph_counts_as_repeated():
    assert Graph().is_repeated()


def test_is_string():
    assert Graph(GraphConfig(graphic_type=GraphType.STRING)).is_string()
    assert not Graph(GraphConfig(graphic_type=GraphType.LINE)).is_string()


def test_config_is_copied():
    config = GraphConfig(start_x=100)
    graph = Graph(config)
    config.start_x = 200
    assert graph.config.start_x == 100