from dataclasses import dataclass, asdict
import vendor.commands as C
from hub_driver import HubConnection, SendError, INITIAL_WAIT
from services.hub_state import HubState, PreconditionError


@dataclass
class RouteOutcome:
    output: int
    input: int
    output_label: str
    input_label: str
    ok: bool
    ack: str = ""
    error: str | None = None

    def to_dict(self) -> dict:
        return asdict(self)


def apply_routing(host: str, port: int, state: HubState, drain_greeting: bool = True,
                  ack_timeout: float = INITIAL_WAIT) -> list[RouteOutcome]:
    """
    Push state's routing to the hub, one route command per output in output order.
    Labels are not sent; they only decorate the outcomes.

    A failed send marks that output only and the rest still go out. There is
    no retry and no rollback.
    """
    if not state.routing:
        raise PreconditionError("nothing to apply")

    outcomes = []
    with HubConnection.open(host, port) as conn:
        if drain_greeting:
            greeting = conn.receive_until_idle()
            if greeting:
                print(f"[APPLY] Initial response from hub: {len(greeting)} bytes")

        for out_idx in sorted(state.routing):
            in_idx = state.routing[out_idx]
            out_name = state.output_name(out_idx)
            in_name = state.input_name(in_idx)
            try:
                conn.send(C.cmd_route_output_input(out_idx, in_idx))
            except SendError as e:
                print(f"[APPLY] ❌ Failed sending output {out_idx + 1}: {e}")
                outcomes.append(RouteOutcome(out_idx, in_idx, out_name, in_name, ok=False, error=str(e)))
                continue

            print(f"[APPLY] Output {out_idx + 1} ({out_name}) <- Input {in_idx + 1} ({in_name})")
            ack = conn.read_once(timeout=ack_timeout).decode("utf-8", errors="replace").strip()
            outcomes.append(RouteOutcome(out_idx, in_idx, out_name, in_name, ok=True, ack=ack))

    failed = sum(1 for o in outcomes if not o.ok)
    print(f"[APPLY] Preset applied: {len(outcomes) - failed} ok, {failed} failed")
    return outcomes
