"""
Pathfinding over the bot's local window.

Builds a weighted grid graph from a LocalView and runs Dijkstra on it
(networkx) to find the first step toward a remembered target.

Conventions:
- The graph is rebuilt on every request, never cached across turns
- Walls are not removed from the graph; every edge touching a wall gets a
  large penalty weight so the search still terminates on stale beliefs
- A route whose cost reaches the penalty is reported as unreachable
"""

import logging
from enum import Enum
from typing import Callable, Optional

import networkx as nx

from .models import CARDINAL_DIRECTIONS, Coordinate, Direction
from .tiles import TileType
from .view import LocalView

logger = logging.getLogger(__name__)

# Weight of any edge incident to a believed wall
OBSTACLE_WEIGHT = 99999
BASE_WEIGHT = 1

# Solver boundary: (graph, source, destination) -> ordered nodes or None
PathSolver = Callable[[nx.Graph, Coordinate, Coordinate], Optional[list[Coordinate]]]


class PathStopReason(Enum):
    """Reasons why pathfinding could not produce a step."""
    SUCCESS = "success"
    ALREADY_AT_TARGET = "already_at_target"
    NO_PATH_EXISTS = "no_path_exists"
    ROUTE_BLOCKED = "route_blocked"


class PathfindingError(Exception):
    """Base class for pathfinding failures."""


class Unreachable(PathfindingError):
    """The target has no usable route from the source. Recoverable."""

    def __init__(self, reason: PathStopReason, message: str = ""):
        self.reason = reason
        self.message = message
        super().__init__(message or reason.value)


class PlanningInvariantError(PathfindingError):
    """The solver returned a next hop that is not a single orthogonal step.

    Only a broken graph can produce this; it is never handled.
    """


# =============================================================================
# Graph construction
# =============================================================================


def build_obstacle_graph(view: LocalView, obstacle_weight: int = OBSTACLE_WEIGHT) -> nx.Graph:
    """
    Build the weighted graph for a window.

    One node per cell, a unit-weight edge between every pair of orthogonally
    adjacent cells, then every edge incident to a WALL cell re-weighted to
    obstacle_weight.

    Args:
        view: Window to build the graph from
        obstacle_weight: Penalty weight for edges touching walls

    Returns:
        A new undirected graph whose nodes are Coordinates
    """
    graph = nx.Graph()
    size = view.size

    for row in range(size):
        for col in range(size):
            graph.add_node(Coordinate(row, col))

    for row in range(size):
        for col in range(size):
            here = Coordinate(row, col)
            # East and south neighbours cover every adjacent pair exactly once
            for neighbor in (Coordinate(row, col + 1), Coordinate(row + 1, col)):
                if view.contains(neighbor):
                    graph.add_edge(here, neighbor, weight=BASE_WEIGHT)

    walls = view.find_all(TileType.WALL)
    for wall in walls:
        _add_obstacle(graph, wall, obstacle_weight)

    logger.debug(f"Built obstacle graph: {graph.number_of_nodes()} nodes, "
                 f"{graph.number_of_edges()} edges, {len(walls)} walls")
    return graph


def _add_obstacle(graph: nx.Graph, cell: Coordinate, weight: int) -> None:
    """Penalise every edge incident to a cell."""
    for direction in CARDINAL_DIRECTIONS:
        neighbor = cell.step(direction)
        if graph.has_edge(cell, neighbor):
            graph[cell][neighbor]["weight"] = weight


# =============================================================================
# Solver and planning
# =============================================================================


def shortest_path(
    graph: nx.Graph,
    source: Coordinate,
    destination: Coordinate,
) -> Optional[list[Coordinate]]:
    """
    Minimum-weight path from source to destination.

    Returns:
        Nodes from source to destination inclusive, or None if unreachable
    """
    try:
        return nx.dijkstra_path(graph, source, destination, weight="weight")
    except (nx.NetworkXNoPath, nx.NodeNotFound) as e:
        logger.debug(f"shortest_path: no path from {source} to {destination}: {e}")
        return None


def route_cost(graph: nx.Graph, path: list[Coordinate]) -> int:
    """Total edge weight along a path."""
    return nx.path_weight(graph, path, weight="weight")


def plan_next_heading(
    graph: nx.Graph,
    self_position: Coordinate,
    target_position: Coordinate,
    solver: PathSolver = shortest_path,
    obstacle_weight: int = OBSTACLE_WEIGHT,
) -> Direction:
    """
    First heading along the shortest route to the target.

    Args:
        graph: Graph from build_obstacle_graph
        self_position: Source cell
        target_position: Destination cell
        solver: Shortest-path primitive
        obstacle_weight: Route cost at which the target counts as walled off

    Returns:
        Direction of the first step

    Raises:
        Unreachable: no route, route only through believed walls, or already there
        PlanningInvariantError: solver returned a non-adjacent next hop
    """
    if self_position == target_position:
        raise Unreachable(PathStopReason.ALREADY_AT_TARGET, f"Already at target {target_position}")

    path = solver(graph, self_position, target_position)
    if not path:
        raise Unreachable(
            PathStopReason.NO_PATH_EXISTS,
            f"No path from {self_position} to {target_position}",
        )

    if len(path) < 2:
        raise PlanningInvariantError(f"Solver returned a path with no next hop: {path}")

    next_hop = path[1]
    drow, dcol = self_position.offset_to(next_hop)
    try:
        direction = Direction.from_delta(drow, dcol)
    except ValueError as e:
        raise PlanningInvariantError(
            f"Next hop {next_hop} is not adjacent to {self_position}"
        ) from e

    try:
        cost = route_cost(graph, path)
    except nx.NetworkXNoPath as e:
        raise PlanningInvariantError(f"Solver returned a path that is not in the graph: {path}") from e
    if cost >= obstacle_weight:
        raise Unreachable(
            PathStopReason.ROUTE_BLOCKED,
            f"Target {target_position} is walled off (route cost {cost})",
        )

    logger.debug(f"plan_next_heading: {self_position} -> {target_position} via {next_hop} "
                 f"({direction.name}, cost {cost})")
    return direction
