from dataclasses import dataclass
from services.hub_state import HubState, PreconditionError, UNKNOWN

NONE = "none"


@dataclass
class RouteDiff:
    output: int
    output_label: str
    preset_input: int | None  # None: output not routed on that side
    hub_input: int | None
    preset_input_label: str
    hub_input_label: str
    is_different: bool

    def to_dict(self) -> dict:
        return {
            "output": self.output,
            "output_label": self.output_label,
            "preset_input": NONE if self.preset_input is None else self.preset_input,
            "hub_input": NONE if self.hub_input is None else self.hub_input,
            "preset_input_label": self.preset_input_label,
            "hub_input_label": self.hub_input_label,
            "is_different": self.is_different,
        }


def _input_label(state: HubState, idx: int | None) -> str:
    if idx is None:
        return NONE
    return state.input_name(idx)


def compare_routing(preset: HubState | None, hub: HubState | None) -> list[RouteDiff]:
    """
    Row per output present in either routing table, in output order.
    An output routed on one side only always counts as different.
    """
    if preset is None or not preset.routing:
        raise PreconditionError("no preset loaded")
    if hub is None:
        raise PreconditionError("hub not read")

    diffs = []
    for out_idx in sorted(set(preset.routing) | set(hub.routing)):
        p_in = preset.routing.get(out_idx)
        h_in = hub.routing.get(out_idx)
        out_label = preset.output_labels.get(out_idx) or hub.output_name(out_idx, UNKNOWN)
        diffs.append(RouteDiff(
            output=out_idx,
            output_label=out_label,
            preset_input=p_in,
            hub_input=h_in,
            preset_input_label=_input_label(preset, p_in),
            hub_input_label=_input_label(hub, h_in),
            is_different=p_in != h_in,
        ))
    return diffs
