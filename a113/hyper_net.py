"""Token-flow network: ports hold tokens, routes move them on each clock tick."""

from __future__ import annotations

import threading
from dataclasses import dataclass, replace
from enum import IntEnum
from typing import Dict, Iterator, List, Optional, Tuple

from .core import LogComponent, get_logger

_log = get_logger(LogComponent.SCT)


class FlightMode(IntEnum):
    """How a route treats the tokens of one input.

    A positive flight mode ``k`` flies the token directly and splits it into
    the next ``k`` outputs.
    """

    VANISH = -1
    DIRECT = 0


class AssertType(IntEnum):
    """What a token answers when a route asks whether it may fly."""

    EJECT = -1
    FAIL = 0
    PASS = 1
    HOLD = 2


@dataclass
class InPlan:
    """How a route draws tokens from one input port."""

    flight_mode: int = FlightMode.DIRECT
    min_tok_cnt: int = 1
    rte_tok_cnt: int = 1
    port: Optional["Port"] = None


@dataclass
class OutPlan:
    """Where a route delivers tokens."""

    port: Optional["Port"] = None


class Port:
    """A place in the network where tokens wait."""

    def __init__(self, str_id: str) -> None:
        self.str_id = str_id
        self._tokens: List[Token] = []
        self._routes: List[Route] = []

    @property
    def tokens(self) -> Tuple["Token", ...]:
        """Tokens waiting here, oldest first."""
        return tuple(self._tokens)

    @property
    def routes(self) -> Tuple["Route", ...]:
        """Routes that draw from this port."""
        return tuple(self._routes)

    def tok_exec(self, token: "Token", dt: float) -> int:
        """Run ``token`` in this port for ``dt``; counts the execution and returns 0."""
        token.exec_count += 1
        token.exec_time += dt
        return 0

    def __repr__(self) -> str:
        return f"Port({self.str_id!r})"


class Route:
    """A transition that moves tokens from its inputs to its outputs."""

    def __init__(self, str_id: str = "") -> None:
        self.str_id = str_id
        self._last_rte_clk = 0
        self._inputs: List[InPlan] = []
        self._outputs: List[OutPlan] = []

    @property
    def inputs(self) -> Tuple[InPlan, ...]:
        return tuple(self._inputs)

    @property
    def outputs(self) -> Tuple[OutPlan, ...]:
        return tuple(self._outputs)

    def assert_ready(self) -> int:
        """Hook asking whether the route may fire."""
        return AssertType.PASS

    def __repr__(self) -> str:
        return f"Route({self.str_id!r})"


class Token:
    """A unit that travels through the network."""

    def __init__(self, str_id: str = "") -> None:
        self.str_id = str_id
        self.port: Optional[Port] = None
        self.requires_assert = False
        self.exec_count = 0
        self.exec_time = 0.0
        self.last_route: Optional[Route] = None
        self.last_route_status: Optional[int] = None
        self._last_rte_clk = 0
        self._last_assert_clk = 0
        self._last_assert_val = AssertType.FAIL
        self._node: Optional[_Node] = None

    def when_routed(self, route: Route, status: int) -> int:
        """Remember the route that moved this token and its status; returns 0."""
        self.last_route = route
        self.last_route_status = status
        return 0

    def assert_route(self, route: Route) -> int:
        """Answer whether this token may fly through ``route``."""
        _log.debug("TOKEN[\"%s\"] asserted by ROUTE[\"%s\"].", self.str_id, route.str_id)
        return AssertType.PASS

    def split(self, offset: int, route: Route) -> "Token":
        """Make the token that a split places on the ``offset``-th extra output."""
        return Token()

    def __repr__(self) -> str:
        return f"Token({self.str_id!r})"


class _Node:
    __slots__ = ("token", "prev", "next")

    def __init__(self, token: Token) -> None:
        self.token = token
        self.prev: Optional[_Node] = None
        self.next: Optional[_Node] = None


class Executor:
    """Owns ports, routes and tokens and advances the network one tick at a time."""

    def __init__(self, name: str = "") -> None:
        self.name = name
        self._clock = 0
        self._head: Optional[_Node] = None
        self._tail: Optional[_Node] = None
        self._count = 0
        self._ports: List[Port] = []
        self._routes: List[Route] = []
        self._ports_by_id: Dict[str, Port] = {}
        self._routes_by_id: Dict[str, Route] = {}
        self._lock = threading.Lock()
        self._cursor: Optional[_Node] = None
        self._cursor_moved = False

    @property
    def clock_counter(self) -> int:
        """Number of ticks run so far."""
        return self._clock

    @property
    def tokens(self) -> Tuple[Token, ...]:
        """Every live token, in the order they joined."""
        result = []
        node = self._head
        while node is not None:
            result.append(node.token)
            node = node.next
        return tuple(result)

    @property
    def ports(self) -> Tuple[Port, ...]:
        return tuple(self._ports)

    @property
    def routes(self) -> Tuple[Route, ...]:
        return tuple(self._routes)

    def _append(self, token: Token) -> None:
        node = _Node(token)
        node.prev = self._tail
        if self._tail is None:
            self._head = node
        else:
            self._tail.next = node
        self._tail = node
        token._node = node
        self._count += 1

    def _remove(self, token: Token) -> None:
        node = token._node
        if node is None:
            return
        if node is self._cursor:
            self._cursor = node.next
            self._cursor_moved = True
        if node.prev is None:
            self._head = node.next
        else:
            node.prev.next = node.next
        if node.next is None:
            self._tail = node.prev
        else:
            node.next.prev = node.prev
        token._node = None
        self._count -= 1

    def push_port(self, port: Port) -> Port:
        """Add ``port`` and index it by its id."""
        self._ports.append(port)
        self._ports_by_id[port.str_id] = port
        _log.debug("Pushed PORT[\"%s\"].", port.str_id)
        return port

    def pull_port(self, str_id: str) -> Optional[Port]:
        """Return the port with ``str_id``, or None."""
        return self._ports_by_id.get(str_id)

    def push_route(self, route: Route) -> Route:
        """Add ``route`` and index it by its id."""
        self._routes.append(route)
        self._routes_by_id[route.str_id] = route
        _log.debug("Pushed ROUTE[\"%s\"].", route.str_id)
        return route

    def pull_route(self, str_id: str) -> Optional[Route]:
        """Return the route with ``str_id``, or None."""
        return self._routes_by_id.get(str_id)

    def _require_route(self, str_id: str) -> Route:
        route = self.pull_route(str_id)
        if route is None:
            _log.error("ROUTE[\"%s\"] does not exist.", str_id)
            raise KeyError(f"ROUTE[{str_id!r}] does not exist")
        return route

    def _require_port(self, str_id: str, role: str) -> Port:
        port = self.pull_port(str_id)
        if port is None:
            _log.error("%s PORT[\"%s\"] does not exist.", role, str_id)
            raise KeyError(f"{role} PORT[{str_id!r}] does not exist")
        return port

    def bind_prp(
        self,
        in_port: str,
        route: str,
        out_port: str,
        in_plan: Optional[InPlan] = None,
        out_plan: Optional[OutPlan] = None,
    ) -> None:
        """Bind input port -> route -> output port."""
        rte = self._require_route(route)
        in_prt = self._require_port(in_port, "Input")
        out_prt = self._require_port(out_port, "Output")
        in_prt._routes.append(rte)
        rte._inputs.append(replace(in_plan or InPlan(), port=in_prt))
        rte._outputs.append(replace(out_plan or OutPlan(), port=out_prt))
        _log.debug(
            "Bound PORT[\"%s\"] -> ROUTE[\"%s\"] -> PORT[\"%s\"].",
            in_prt.str_id, rte.str_id, out_prt.str_id,
        )

    def bind_rp(self, route: str, out_port: str, out_plan: Optional[OutPlan] = None) -> None:
        """Bind route -> output port."""
        rte = self._require_route(route)
        out_prt = self._require_port(out_port, "Output")
        rte._outputs.append(replace(out_plan or OutPlan(), port=out_prt))
        _log.debug("Bound ROUTE[\"%s\"] -> PORT[\"%s\"].", rte.str_id, out_prt.str_id)

    def bind_pr(self, in_port: str, route: str, in_plan: Optional[InPlan] = None) -> None:
        """Bind input port -> route."""
        in_prt = self._require_port(in_port, "Input")
        rte = self._require_route(route)
        in_prt._routes.append(rte)
        rte._inputs.append(replace(in_plan or InPlan(), port=in_prt))
        _log.debug("Bound PORT[\"%s\"] -> ROUTE[\"%s\"].", in_prt.str_id, rte.str_id)

    def inject(self, port: str, token: Token) -> Token:
        """Place ``token`` in the port with id ``port``."""
        with self._lock:
            prt = self.pull_port(port)
            if prt is None:
                raise KeyError(f"PORT[{port!r}] does not exist")
            self._append(token)
            token.requires_assert = type(token).assert_route is not Token.assert_route
            prt._tokens.append(token)
            token.port = prt
            _log.debug("TOKEN[\"%s\"] injected in PORT[\"%s\"].", token.str_id, prt.str_id)
        return token

    def clock(self, dt: float = 0.0) -> int:
        """Run one tick and return how many token slots were visited.

        Tokens and routes start out marked as clocked at tick 0, so the first
        tick moves nothing. Each route fires at most once per tick and each
        token flies at most once per tick.
        """
        with self._lock:
            clock = self._clock
            limit = self._count
            visited = 0
            self._cursor = self._head
            while self._cursor is not None and visited < limit:
                self._cursor_moved = False
                token = self._cursor.token
                if token._last_rte_clk != clock and token.port is not None:
                    for route in list(token.port._routes):
                        if route._last_rte_clk == clock:
                            continue
                        route._last_rte_clk = clock
                        self._fire(route, clock)
                if not self._cursor_moved and self._cursor is not None:
                    self._cursor = self._cursor.next
                visited += 1
            self._cursor = None
            self._clock += 1
            return visited

    def _fire(self, route: Route, clock: int) -> None:
        if any(plan.min_tok_cnt > len(plan.port._tokens) for plan in route._inputs):
            return

        pending = len(route._inputs)
        for plan in route._inputs:
            needed = plan.min_tok_cnt
            for tok in plan.port._tokens:
                answer = tok.assert_route(route)
                if answer == AssertType.FAIL:
                    continue
                tok._last_assert_clk = clock
                tok._last_assert_val = AssertType(answer)
                needed -= 1
                if needed == 0:
                    pending -= 1
        if pending != 0:
            return

        outputs = route._outputs
        out_idx = 0
        eff_out = out_idx
        for plan in route._inputs:
            waiting = plan.port._tokens
            i = 0
            n = 1
            while n <= plan.rte_tok_cnt and i < len(waiting):
                flying = waiting[i]
                if flying._last_assert_clk != clock:
                    i += 1
                    continue
                if flying._last_assert_val == AssertType.HOLD and n != plan.rte_tok_cnt:
                    i += 1
                    continue

                eff_out = out_idx
                n += 1
                del waiting[i]
                if (
                    eff_out >= len(outputs)
                    or plan.flight_mode == FlightMode.VANISH
                    or flying._last_assert_val == AssertType.EJECT
                ):
                    _log.debug("ROUTE[\"%s\"] ejected TOKEN[\"%s\"].", route.str_id, flying.str_id)
                    self._remove(flying)
                    continue

                target = outputs[eff_out].port
                target._tokens.append(flying)
                flying.port = target
                flying._last_rte_clk = clock
                _log.debug(
                    "ROUTE[\"%s\"] flew TOKEN[\"%s\"] from PORT[\"%s\"] to PORT[\"%s\"].",
                    route.str_id, flying.str_id, plan.port.str_id, target.str_id,
                )

                eff_out += 1
                offset = 1
                while offset <= plan.flight_mode and eff_out < len(outputs):
                    piece = flying.split(offset, route)
                    self._append(piece)
                    split_port = outputs[eff_out].port
                    split_port._tokens.append(piece)
                    piece.port = split_port
                    _log.debug(
                        "TOKEN[\"%s\"] splitted in PORT[\"%s\"].", piece.str_id, split_port.str_id
                    )
                    offset += 1
                    eff_out += 1
            out_idx = eff_out

        if out_idx != len(outputs):
            _log.warning("ROUTE[\"%s\"] did not fill all output ports.", route.str_id)

    def make_graphviz(self) -> str:
        """Render the network as a Graphviz digraph."""
        lines: List[str] = []
        for route in self._routes:
            lines.extend(f"{plan.port.str_id}->{route.str_id}\n" for plan in route._inputs)
            lines.extend(f"{route.str_id}->{plan.port.str_id}\n" for plan in route._outputs)
            lines.append(
                f'{route.str_id}[shape=box, width=.1, height=1, xlabel="{route.str_id}", label=""]\n'
            )
        for port in self._ports:
            color = "darkgray" if port._tokens else "lightgray"
            lines.append(
                f'{port.str_id}[label="{port.str_id}\\n({len(port._tokens)})",'
                f"style=filled,color={color}]\n"
            )
        return (
            'digraph G { rankdir="LR" label="a113::HyN::Executor"\n'
            'graph [fontname = "Comic Sans MS"]\n'
            'node [fontname = "Comic Sans MS"]\n'
            'edge [fontname = "Comic Sans MS"]\n'
            + "".join(lines)
            + "}"
        )

    def __iter__(self) -> Iterator[Token]:
        return iter(self.tokens)