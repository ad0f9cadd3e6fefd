import pytest

import hub_driver
from hub_driver import ConnectError, SendError
from services.apply import apply_routing
from services.hub_state import HubState, PreconditionError


@pytest.fixture
def preset():
    return HubState(
        input_labels={0: "CAM1", 1: "CAM2"},
        output_labels={0: "PGM", 1: "REC"},
        routing={5: 0, 0: 1, 1: 0, 3: 1, 2: 4, 4: 0},
        description="show",
    )


def test_apply_sends_one_command_per_output_in_order(fake_hub, preset):
    hub = fake_hub(greeting=b"PROTOCOL PREAMBLE:\nVersion: 2.8\n\n")
    outcomes = apply_routing("127.0.0.1", hub.port, preset)

    assert [o.output for o in outcomes] == [0, 1, 2, 3, 4, 5]
    assert all(o.ok for o in outcomes)
    assert all(o.ack == "ACK" for o in outcomes)
    assert hub.routes == sorted(preset.routing.items())


def test_apply_labels_unknown_indexes(fake_hub, preset):
    hub = fake_hub()
    outcomes = apply_routing("127.0.0.1", hub.port, preset, drain_greeting=False)
    by_out = {o.output: o for o in outcomes}
    assert by_out[0].output_label == "PGM"
    assert by_out[0].input_label == "CAM2"
    assert by_out[2].output_label == "unknown"
    assert by_out[2].input_label == "unknown"


def test_missing_ack_is_not_a_failure(fake_hub, preset):
    hub = fake_hub(route_ack=b"")
    outcomes = apply_routing("127.0.0.1", hub.port, preset, drain_greeting=False, ack_timeout=0.05)
    assert all(o.ok and o.ack == "" for o in outcomes)
    assert len(hub.wait_for_routes(len(preset.routing))) == len(preset.routing)


def test_apply_twice_gives_same_outcomes(fake_hub, preset):
    hub = fake_hub()
    first = apply_routing("127.0.0.1", hub.port, preset)
    second = apply_routing("127.0.0.1", hub.port, preset)
    assert first == second
    assert hub.routing == preset.routing


def test_one_failed_send_does_not_stop_the_rest(fake_hub, preset, monkeypatch):
    real_send = hub_driver.HubConnection.send

    def flaky_send(self, payload):
        if payload.endswith(b"\n3 1\n\n"):
            raise SendError("simulated write failure")
        return real_send(self, payload)

    monkeypatch.setattr(hub_driver.HubConnection, "send", flaky_send)
    hub = fake_hub()
    outcomes = apply_routing("127.0.0.1", hub.port, preset)

    assert [o.output for o in outcomes] == [0, 1, 2, 3, 4, 5]
    assert [o.ok for o in outcomes] == [True, True, True, False, True, True]
    assert outcomes[3].error == "simulated write failure"
    assert [r[0] for r in hub.wait_for_routes(5)] == [0, 1, 2, 4, 5]


def test_empty_routing_is_a_noop(closed_port):
    with pytest.raises(PreconditionError, match="nothing to apply"):
        apply_routing("127.0.0.1", closed_port, HubState())


def test_apply_connect_failure(closed_port, preset):
    with pytest.raises(ConnectError):
        apply_routing("127.0.0.1", closed_port, preset)
