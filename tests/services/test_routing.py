"""Tests for constraint-aware route finding."""

from __future__ import annotations

import math

import pytest
from pydantic import ValidationError

from campusctl.domain.models import CampusGraph, Edge
from campusctl.domain.types import OptimizeBy, Weather
from campusctl.infrastructure.graph.engine import GraphEngine
from campusctl.services import structure
from campusctl.services.routing import (
    BUILT_IN_PROFILES,
    CostModifier,
    RouteRequest,
    base_weight,
    edge_cost,
    find_route,
    is_traversable,
)
from tests.conftest import apply, build_graph


def _request(start: str = "a", end: str = "b", **kwargs: object) -> RouteRequest:
    return RouteRequest.model_validate({"start": start, "end": end, **kwargs})


def _width_graph(edge_width: float) -> CampusGraph:
    return build_graph(
        {"a": (0, 0), "b": (10, 0)},
        [
            {
                "id": "door",
                "sourceNodeId": "a",
                "targetNodeId": "b",
                "constraints": {"max": {"width": edge_width}},
            }
        ],
    )


@pytest.fixture
def diamond() -> CampusGraph:
    """a -> b directly via a long corridor, or via c (outdoor) and d (steps)."""
    return build_graph(
        {"a": (0, 0), "b": (10, 0), "c": (5, 2), "d": (5, -2)},
        [
            {"id": "ab", "sourceNodeId": "a", "targetNodeId": "b", "distance": 30.0},
            {"id": "ac", "sourceNodeId": "a", "targetNodeId": "c", "isOutdoor": True},
            {"id": "cb", "sourceNodeId": "c", "targetNodeId": "b", "isOutdoor": True},
            {"id": "ad", "sourceNodeId": "a", "targetNodeId": "d", "hasSteps": True},
            {"id": "db", "sourceNodeId": "d", "targetNodeId": "b", "width": 0.9},
        ],
    )


class TestBaseWeight:
    def test_distance(self) -> None:
        edge = Edge(source_node_id="a", target_node_id="b", distance=4.0, estimated_time=9.0)
        assert base_weight(edge) == 4.0

    def test_time(self) -> None:
        edge = Edge(source_node_id="a", target_node_id="b", distance=4.0, estimated_time=9.0)
        assert base_weight(edge, OptimizeBy.TIME) == 9.0

    def test_time_falls_back_to_distance(self) -> None:
        edge = Edge(source_node_id="a", target_node_id="b", distance=4.0)
        assert base_weight(edge, OptimizeBy.TIME) == 4.0

    def test_unknown_distance(self) -> None:
        assert base_weight(Edge(source_node_id="a", target_node_id="b")) == 1.0


class TestEdgeCost:
    def test_cart_steps_impassable(self) -> None:
        edge = Edge(source_node_id="a", target_node_id="b", distance=1.0, has_steps=True)
        assert math.isinf(edge_cost(edge, BUILT_IN_PROFILES["cart"]))

    def test_cart_narrow_penalty(self) -> None:
        edge = Edge(source_node_id="a", target_node_id="b", distance=2.0, width=1.0)
        assert edge_cost(edge, BUILT_IN_PROFILES["cart"]) == 20.0

    def test_accessible_prefers_vertical(self) -> None:
        edge = Edge(source_node_id="a", target_node_id="b", distance=8.0, is_vertical=True)
        assert edge_cost(edge, BUILT_IN_PROFILES["accessible"]) == 4.0

    def test_rain_profile(self) -> None:
        edge = Edge(source_node_id="a", target_node_id="b", distance=2.0, is_outdoor=True)
        assert edge_cost(edge, BUILT_IN_PROFILES["rain"]) == 10.0

    @pytest.mark.parametrize(
        ("weather", "expected"), [(Weather.CLEAR, 2.0), (Weather.RAIN, 6.0), (Weather.SNOW, 16.0)]
    )
    def test_weather_on_outdoor_edges(self, weather: Weather, expected: float) -> None:
        edge = Edge(source_node_id="a", target_node_id="b", distance=2.0, is_outdoor=True)
        assert edge_cost(edge, weather=weather) == expected

    def test_weather_ignores_indoor_edges(self) -> None:
        edge = Edge(source_node_id="a", target_node_id="b", distance=2.0, is_outdoor=False)
        assert edge_cost(edge, weather=Weather.SNOW) == 2.0

    def test_never_negative(self) -> None:
        edge = Edge(source_node_id="a", target_node_id="b", distance=1.0, label="shortcut")
        profile = BUILT_IN_PROFILES["default"].model_copy(
            update={
                "modifiers": (
                    CostModifier(field="label", operator="==", value="shortcut", additive=-5.0),
                )
            }
        )
        assert edge_cost(edge, profile) == 0.0


class TestCostModifier:
    def test_numeric_comparison_skips_missing(self) -> None:
        mod = CostModifier(field="width", operator="<", value=1.2, multiplier=10.0)
        assert not mod.matches(Edge(source_node_id="a", target_node_id="b"))

    def test_numeric_comparison_skips_booleans(self) -> None:
        mod = CostModifier(field="has_steps", operator=">", value=0)
        assert not mod.matches(Edge(source_node_id="a", target_node_id="b", has_steps=True))

    def test_not_equal(self) -> None:
        mod = CostModifier(field="label", operator="!=", value="x")
        assert mod.matches(Edge(source_node_id="a", target_node_id="b", label="y"))


class TestTraversable:
    def test_narrow_traveller_fits_wide_edge(self) -> None:
        """A 1.0 traveller passes an edge that admits up to 2.0."""
        graph = _width_graph(2.0)
        request = _request(constraints={"max": {"width": 1.0}})
        assert is_traversable(graph.edges["door"], "a", "b", request)
        assert find_route(graph, request).edge_ids == ["door"]

    def test_wide_traveller_excluded_by_narrow_edge(self) -> None:
        """A 1.0 traveller cannot use an edge that admits at most 0.8."""
        graph = _width_graph(0.8)
        request = _request(constraints={"max": {"width": 1.0}})
        assert not is_traversable(graph.edges["door"], "a", "b", request)
        assert find_route(graph, request) is None

    def test_unconstrained_traveller(self) -> None:
        graph = _width_graph(0.8)
        assert find_route(graph, _request()) is not None

    def test_required_tag(self) -> None:
        edge = Edge(
            source_node_id="a", target_node_id="b", constraints={"requires": ["keycard"]}
        )
        assert not is_traversable(edge, "a", "b", _request())
        granted = _request(constraints={"requires": ["keycard", "badge"]})
        assert is_traversable(edge, "a", "b", granted)

    def test_edge_blocked_direction(self) -> None:
        edge = Edge(source_node_id="a", target_node_id="b", constraints={"blocked": [("a", "b")]})
        assert not is_traversable(edge, "a", "b", _request())
        assert is_traversable(edge, "b", "a", _request())

    def test_user_blocked_direction(self) -> None:
        edge = Edge(source_node_id="a", target_node_id="b")
        request = _request(constraints={"blocked": [{"from": "b", "to": "a"}]})
        assert is_traversable(edge, "a", "b", request)
        assert not is_traversable(edge, "b", "a", request)

    def test_avoid_edge_and_node(self) -> None:
        edge = Edge(id="e", source_node_id="a", target_node_id="b")
        assert not is_traversable(edge, "a", "b", _request(avoid=["e"]))
        assert not is_traversable(edge, "a", "b", _request(avoid=["b"]))


class TestFindRoute:
    def test_cheapest_path(self, diamond: CampusGraph) -> None:
        route = find_route(diamond, _request())
        assert route is not None
        assert route.node_ids[0] == "a"
        assert route.node_ids[-1] == "b"
        assert route.edge_ids != ["ab"]
        assert route.cost == pytest.approx(route.distance)

    def test_disconnected(self) -> None:
        graph = build_graph({"a": (0, 0), "b": (1, 0)}, [])
        assert find_route(graph, _request()) is None

    def test_unknown_endpoint(self, diamond: CampusGraph) -> None:
        assert find_route(diamond, _request(end="ghost")) is None

    def test_start_equals_end(self, diamond: CampusGraph) -> None:
        route = find_route(diamond, _request(end="a"))
        assert route.node_ids == ["a"]
        assert route.edge_ids == []
        assert route.cost == 0.0

    def test_forward_edge_is_one_way(self) -> None:
        graph = build_graph(
            {"a": (0, 0), "b": (1, 0)},
            [{"sourceNodeId": "a", "targetNodeId": "b", "direction": "forward"}],
        )
        assert find_route(graph, _request()) is not None
        assert find_route(graph, _request("b", "a")) is None

    def test_backward_edge(self) -> None:
        graph = build_graph(
            {"a": (0, 0), "b": (1, 0)},
            [{"sourceNodeId": "a", "targetNodeId": "b", "direction": "backward"}],
        )
        assert find_route(graph, _request()) is None
        assert find_route(graph, _request("b", "a")) is not None

    def test_cart_avoids_steps(self, diamond: CampusGraph) -> None:
        route = find_route(diamond, _request(profile="cart"))
        assert "ad" not in route.edge_ids

    def test_snow_avoids_outdoor(self, diamond: CampusGraph) -> None:
        route = find_route(diamond, _request(weather="snow", avoid=["d"]))
        assert route.edge_ids == ["ab"]
        assert route.distance == 30.0

    def test_avoid_forces_detour(self, diamond: CampusGraph) -> None:
        route = find_route(diamond, _request(avoid=["ab", "d"]))
        assert route.edge_ids == ["ac", "cb"]

    def test_unmeasured_edge_adds_no_distance(self) -> None:
        graph = build_graph(
            {"a": (0, 0), "b": (3, 4), "c": (3, 8)},
            [
                {"id": "ab", "sourceNodeId": "a", "targetNodeId": "b"},
                {"id": "bc", "sourceNodeId": "b", "targetNodeId": "c"},
            ],
        )
        unmeasured = graph.edges["bc"].model_copy(update={"distance": None})
        graph = graph.replace(edges={**graph.edges, "bc": unmeasured})
        route = find_route(graph, _request("a", "c"))
        assert route.edge_ids == ["ab", "bc"]
        assert route.distance == pytest.approx(5.0)
        assert route.cost == pytest.approx(6.0)

    def test_cheapest_parallel_edge_used(self) -> None:
        graph = build_graph(
            {"a": (0, 0), "b": (1, 0)},
            [
                {"id": "slow", "sourceNodeId": "a", "targetNodeId": "b", "distance": 9.0},
                {"id": "fast", "sourceNodeId": "a", "targetNodeId": "b", "distance": 2.0},
            ],
        )
        assert find_route(graph, _request()).edge_ids == ["fast"]

    def test_alternatives(self, diamond: CampusGraph) -> None:
        route = find_route(diamond, _request(max_alternatives=2))
        assert len(route.alternatives) == 2
        paths = [route.node_ids] + [alt.node_ids for alt in route.alternatives]
        assert len({tuple(p) for p in paths}) == 3
        costs = [alt.cost for alt in route.alternatives]
        assert costs == sorted(costs)
        assert all(alt.cost >= route.cost for alt in route.alternatives)

    def test_reuses_engine(self, diamond: CampusGraph) -> None:
        engine = GraphEngine(diamond)
        first = find_route(diamond, _request(), engine=engine)
        second = find_route(diamond, _request(profile="cart"), engine=engine)
        assert first is not None and second is not None

    def test_floor_transitions(self, two_floor_graph: CampusGraph) -> None:
        graph = apply(structure.add_vertical_link(two_floor_graph, "s1", "s2"))
        route = find_route(graph, _request("s1", "s2"))
        assert len(route.floor_transitions) == 1
        transition = route.floor_transitions[0]
        assert transition.node_id == "s2"
        assert transition.description == "1F -> 2F"


class TestRouteRequest:
    def test_unknown_profile(self) -> None:
        with pytest.raises(ValidationError):
            _request(profile="hovercraft")

    def test_negative_alternatives(self) -> None:
        with pytest.raises(ValidationError):
            _request(max_alternatives=-1)

    def test_built_in_profiles(self) -> None:
        assert set(BUILT_IN_PROFILES) == {"default", "cart", "rain", "accessible"}
