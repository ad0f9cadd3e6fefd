# services/presets.py
from pathlib import Path
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from hub_driver import HubError
from services.hub_state import HubState

EXT = ".json"


class PresetError(HubError):
    pass


class PresetDocument(BaseModel):
    """
    On-disk preset. Index keys are written as decimal strings and read back
    as ints; fields other than these four are ignored.
    """
    model_config = ConfigDict(extra="ignore")

    description: str = ""
    routing: dict[int, int] = Field(default_factory=dict)
    inputs: dict[int, str] = Field(default_factory=dict)
    outputs: dict[int, str] = Field(default_factory=dict)

    @classmethod
    def from_state(cls, state: HubState) -> "PresetDocument":
        return cls(
            description=state.description,
            routing=dict(sorted(state.routing.items())),
            inputs=dict(sorted(state.input_labels.items())),
            outputs=dict(sorted(state.output_labels.items())),
        )

    def to_state(self, source_label: str = "") -> HubState:
        return HubState(
            input_labels=dict(self.inputs),
            output_labels=dict(self.outputs),
            routing=dict(self.routing),
            description=self.description,
            source_label=source_label,
        )


def preset_path(folder: str | Path, name: str) -> Path:
    """<folder>/<name>.json; names that would leave the folder are refused."""
    name = (name or "").strip() or "preset"
    if Path(name).name != name or "\\" in name or name in (".", ".."):
        raise PresetError(f"Invalid preset name: {name!r}")
    if not name.endswith(EXT):
        name += EXT
    return Path(folder) / name


def save_preset(state: HubState, path: str | Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(PresetDocument.from_state(state).model_dump_json(indent=2) + "\n", encoding="utf-8")
    print(f"[PRESET] Saved to {path}")
    return path


def load_preset(path: str | Path) -> HubState:
    path = Path(path)
    try:
        doc = PresetDocument.model_validate_json(path.read_text(encoding="utf-8"))
    except UnicodeDecodeError as e:
        raise PresetError(f"Invalid preset {path}: not UTF-8 text") from e
    except ValidationError as e:
        raise PresetError(f"Invalid preset {path}: {e.error_count()} error(s)") from e
    print(f"[PRESET] Loaded {path}")
    return doc.to_state(source_label=str(path))


def preset_description(path: Path) -> str:
    try:
        doc = PresetDocument.model_validate_json(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, ValidationError):
        return "(cannot open)"
    return doc.description or "(no description)"


def list_presets(folder: str | Path) -> list[tuple[str, str]]:
    """(name, description) for every preset file in folder, sorted by name."""
    folder = Path(folder)
    if not folder.is_dir():
        return []
    return [(p.stem, preset_description(p)) for p in sorted(folder.glob(f"*{EXT}"))]


def delete_preset(folder: str | Path, name: str) -> Path:
    path = preset_path(folder, name)
    path.unlink()
    print(f"[PRESET] Deleted {path}")
    return path
