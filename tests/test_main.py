from main import handle_key


def test_keys_map_to_intents(controller, endpoint, scheduler):
    assert handle_key(ord('w'), controller) is True
    assert handle_key(ord('w'), controller) is True
    assert handle_key(ord('a'), controller) is True
    assert controller.brightness == 60
    assert controller.temperature == 160
    assert endpoint.payloads == []

    assert handle_key(ord('t'), controller) is True
    assert controller.is_on is True
    assert len(endpoint.payloads) == 1


def test_unbound_key_is_ignored(controller, scheduler):
    assert handle_key(ord('x'), controller) is True
    assert scheduler.schedule_calls == 0


def test_quit_keys(controller):
    assert handle_key(ord('q'), controller) is False
    assert handle_key(27, controller) is False
