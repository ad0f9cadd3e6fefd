from dataclasses import dataclass, field
import vendor.commands as C
from hub_driver import HubConnection, FETCH_INITIAL_WAIT, FOLLOWUP_WAIT
from vendor.parsers import extract_section, split_tokens, parse_labels, parse_routing
from services.hub_state import HubState


@dataclass
class FetchResult:
    state: HubState
    preamble: str
    skipped: list[str] = field(default_factory=list)


def _decode(raw: bytes) -> str:
    return raw.decode("utf-8", errors="replace")


def _section(direct: str, joined: str, marker: str) -> str:
    # A command's own reply wins; a quiet command falls back to the joined buffer
    if direct:
        return direct
    return extract_section(joined, marker, C.END_MARKERS)


def fetch_hub(host: str, port: int, initial_wait: float = FETCH_INITIAL_WAIT,
              followup_wait: float = FOLLOWUP_WAIT, strict: bool = False) -> FetchResult:
    """
    Read preamble, input labels, output labels and routing over one connection.

    All four commands go out in order even when an earlier one got no reply.
    Returns a new HubState; nothing the caller holds is modified, so a
    ConnectError/SendError halfway leaves existing state as it was.
    """
    replies = []
    with HubConnection.open(host, port) as conn:
        for cmd in (C.CMD_PREAMBLE, C.CMD_GET_INPUTS, C.CMD_GET_OUTPUTS, C.CMD_GET_ROUTING):
            conn.send(cmd)
            rep = conn.receive_until_idle(initial_wait, followup_wait)
            print(f"[FETCH] cmd 0x{cmd[0]:02x} -> {len(rep)} bytes")
            replies.append(_decode(rep))

    preamble, inputs, outputs, routing = replies
    joined = "\n".join(replies)

    in_labels, skip_in = parse_labels(
        split_tokens(_section(inputs, joined, C.INPUT_LABELS)), strict)
    out_labels, skip_out = parse_labels(
        split_tokens(_section(outputs, joined, C.OUTPUT_LABELS)), strict)
    route_map, skip_route = parse_routing(
        split_tokens(_section(routing, joined, C.VIDEO_OUTPUT_ROUTING)), strict)

    state = HubState(
        input_labels=in_labels,
        output_labels=out_labels,
        routing=route_map,
        source_label=f"{host}:{port}",
    )
    print(f"[FETCH] {len(in_labels)} inputs, {len(out_labels)} outputs, {len(route_map)} routes")
    return FetchResult(state=state, preamble=preamble, skipped=skip_in + skip_out + skip_route)
