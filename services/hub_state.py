# services/hub_state.py
from dataclasses import dataclass, field
from hub_driver import HubError

UNKNOWN = "unknown"


class PreconditionError(HubError):
    """Operation asked for before its inputs exist (no preset, hub not read, ...)."""


@dataclass
class HubState:
    """
    Labels and routing of one hub, either as read from the device or as
    loaded from a preset file. Indexes are 0-based protocol indexes.
    """
    input_labels: dict[int, str] = field(default_factory=dict)
    output_labels: dict[int, str] = field(default_factory=dict)
    routing: dict[int, int] = field(default_factory=dict)  # output -> input
    description: str = ""
    source_label: str = ""

    def replace_with(self, other: "HubState"):
        """Take over labels and routing from other in one step."""
        self.input_labels = dict(other.input_labels)
        self.output_labels = dict(other.output_labels)
        self.routing = dict(other.routing)
        self.description = other.description
        self.source_label = other.source_label

    def input_name(self, idx: int | None, default: str = UNKNOWN) -> str:
        return self.input_labels.get(idx, default)

    def output_name(self, idx: int | None, default: str = UNKNOWN) -> str:
        return self.output_labels.get(idx, default)

    def routing_rows(self) -> list[dict]:
        """
        One row per routed output in output order. *_number fields are the
        1-based numbers shown on the hub's front panel.
        """
        rows = []
        for out_idx in sorted(self.routing):
            in_idx = self.routing[out_idx]
            rows.append({
                "output": out_idx,
                "output_number": out_idx + 1,
                "output_label": self.output_name(out_idx),
                "input": in_idx,
                "input_number": in_idx + 1,
                "input_label": self.input_name(in_idx),
            })
        return rows

    def summary(self) -> dict:
        return {
            "source": self.source_label,
            "description": self.description,
            "inputs": {i: self.input_labels[i] for i in sorted(self.input_labels)},
            "outputs": {i: self.output_labels[i] for i in sorted(self.output_labels)},
            "routing": self.routing_rows(),
        }
