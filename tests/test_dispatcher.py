"""Test the command dispatcher."""
import pytest

from homeassistant.exceptions import TemplateError

from custom_components.vehicle_scheduler.core.dispatcher import (
    DEFAULT_MESSAGE_BODY,
    DEFAULT_MESSAGE_SUBJECT,
    UNPLUGGED_NOTIFIED,
    UNPLUGGED_PLUGGED_IN,
    UNPLUGGED_UNKNOWN,
    CommandDispatcher,
    format_entry,
)
from custom_components.vehicle_scheduler.models import (
    Command,
    InactivityMode,
    MessageTarget,
    Outcome,
    StateSnapshot,
)

from .conftest import make_snapshot


@pytest.fixture
def dispatcher(mock_client, execution_context):
    return CommandDispatcher(mock_client, execution_context)


def test_format_entry():
    assert format_entry(Command.CHARGE_OFF, 0, True, "") == "Charge Off: succeeded"
    assert format_entry(Command.CHARGE_SET, 80, True, "") == "Charge Set (80.0): succeeded"
    assert (
        format_entry(Command.HVAC_ON, 68.5, False, "timeout")
        == "HVAC On (68.5): failed, timeout"
    )


@pytest.mark.asyncio
async def test_charge_set_already_set_is_success(dispatcher, mock_client):
    mock_client.async_set_charge_target.return_value = Outcome.failed("already_set")

    result = await dispatcher.async_dispatch(Command.CHARGE_SET, 80.0, None, make_snapshot())

    assert result.succeeded
    assert result.entry == "Charge Set (80.0): succeeded"
    assert result.notes == []
    mock_client.async_set_charge_target.assert_awaited_once_with(80)


@pytest.mark.asyncio
async def test_charge_set_failure_adds_note(dispatcher, mock_client):
    mock_client.async_set_charge_target.return_value = Outcome.failed("timeout")

    result = await dispatcher.async_dispatch(Command.CHARGE_SET, 80.0, None, make_snapshot())

    assert not result.succeeded
    assert result.entry == "Charge Set (80.0): failed, timeout"
    assert result.notes == ["Unable to set charge target: timeout"]


@pytest.mark.asyncio
async def test_charge_on_reports_start_outcome(dispatcher, mock_client):
    """A failed target set does not stop charging from starting."""
    mock_client.async_set_charge_target.return_value = Outcome.failed("timeout")

    result = await dispatcher.async_dispatch(Command.CHARGE_ON, 90.0, None, make_snapshot())

    assert result.succeeded
    assert result.entry == "Charge On (90.0): succeeded"
    assert result.notes == ["Unable to set charge target: timeout"]
    mock_client.async_start_charging.assert_awaited_once()


@pytest.mark.asyncio
async def test_charge_off(dispatcher, mock_client):
    mock_client.async_stop_charging.return_value = Outcome.failed("vehicle asleep")

    result = await dispatcher.async_dispatch(Command.CHARGE_OFF, 0, None, make_snapshot())

    assert not result.succeeded
    assert result.entry == "Charge Off: failed, vehicle asleep"


@pytest.mark.asyncio
async def test_hvac_on_uses_preferred_unit(dispatcher, mock_client):
    result = await dispatcher.async_dispatch(Command.HVAC_ON, 70.0, None, make_snapshot())

    assert result.succeeded
    mock_client.async_set_temperature.assert_awaited_once_with(70.0, 70.0, "F")
    mock_client.async_start_climate.assert_awaited_once()


@pytest.mark.asyncio
async def test_hvac_on_temperature_failure_skips_climate(dispatcher, mock_client):
    mock_client.async_set_temperature.return_value = Outcome.failed("busy")

    result = await dispatcher.async_dispatch(Command.HVAC_ON, 70.0, None, make_snapshot())

    assert not result.succeeded
    assert result.entry == "HVAC On (70.0): failed, busy"
    mock_client.async_start_climate.assert_not_awaited()


@pytest.mark.asyncio
async def test_hvac_off(dispatcher, mock_client):
    result = await dispatcher.async_dispatch(Command.HVAC_OFF, 0, None, make_snapshot())

    assert result.succeeded
    mock_client.async_stop_climate.assert_awaited_once()


@pytest.mark.asyncio
async def test_awake_and_sleep_only_touch_the_hint(dispatcher, mock_client, execution_context):
    awake = await dispatcher.async_dispatch(Command.AWAKE, 0, None, make_snapshot())
    assert execution_context.inactivity.mode == InactivityMode.AWAKE

    sleep = await dispatcher.async_dispatch(Command.SLEEP, 0, None, None)
    assert execution_context.inactivity.mode == InactivityMode.SLEEP

    assert awake.entry == "Awake: succeeded"
    assert sleep.entry == "Sleep: succeeded"
    mock_client.async_stop_climate.assert_not_awaited()
    mock_client.async_set_charge_target.assert_not_awaited()


@pytest.mark.asyncio
async def test_unplugged_notifies(dispatcher, mock_notifier):
    snapshot = make_snapshot(vehicle_range=87.9, charging_state="disconnected")

    result = await dispatcher.async_dispatch(Command.UNPLUGGED, 0, None, snapshot)

    assert result.succeeded
    assert not result.reportable
    assert result.outcome.explanation == UNPLUGGED_NOTIFIED
    mock_notifier.async_send.assert_awaited_once_with(
        "notify.mobile_app_phone",
        "Your car is not plugged in",
        "Your car is not plugged in. Range = 87",
    )


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "snapshot,explanation",
    [
        (make_snapshot(charging_state="stopped", pilot_current=None), UNPLUGGED_UNKNOWN),
        (StateSnapshot.invalid(), UNPLUGGED_UNKNOWN),
        (make_snapshot(pilot_current=40), UNPLUGGED_PLUGGED_IN),
    ],
)
async def test_unplugged_without_notification(dispatcher, mock_notifier, snapshot, explanation):
    result = await dispatcher.async_dispatch(Command.UNPLUGGED, 0, None, snapshot)

    assert result.succeeded
    assert result.outcome.explanation == explanation
    mock_notifier.async_send.assert_not_awaited()


@pytest.mark.asyncio
async def test_unplugged_send_failure_still_succeeds(dispatcher, mock_notifier):
    mock_notifier.async_send.return_value = False
    snapshot = make_snapshot(charging_state="disconnected")

    result = await dispatcher.async_dispatch(Command.UNPLUGGED, 0, None, snapshot)

    assert result.succeeded


@pytest.mark.asyncio
async def test_message_renders_and_sends(dispatcher, mock_notifier, execution_context):
    target = MessageTarget(
        address="notify.family", subject="Car {{ 1 }}", body="Range {{ 2 }}"
    )
    execution_context.renderer.render.side_effect = lambda text: text.upper()

    result = await dispatcher.async_dispatch(Command.MESSAGE, 0, target, make_snapshot())

    assert result.succeeded
    assert not result.reportable
    mock_notifier.async_send.assert_awaited_once_with(
        "notify.family", "CAR {{ 1 }}", "RANGE {{ 2 }}"
    )


@pytest.mark.asyncio
async def test_message_without_target_uses_defaults(dispatcher, mock_notifier):
    result = await dispatcher.async_dispatch(Command.MESSAGE, 0, None, make_snapshot())

    assert result.succeeded
    mock_notifier.async_send.assert_awaited_once_with(
        "notify.mobile_app_phone", DEFAULT_MESSAGE_SUBJECT, DEFAULT_MESSAGE_BODY
    )


@pytest.mark.asyncio
async def test_message_render_failure(dispatcher, mock_notifier, execution_context):
    execution_context.renderer.render.side_effect = TemplateError("bad template")
    target = MessageTarget(address="notify.family", subject="{{", body="")

    result = await dispatcher.async_dispatch(Command.MESSAGE, 0, target, make_snapshot())

    assert not result.succeeded
    assert result.entry.startswith("Message: failed, message render failed:")
    mock_notifier.async_send.assert_not_awaited()


@pytest.mark.asyncio
async def test_message_send_failure(dispatcher, mock_notifier):
    mock_notifier.async_send.return_value = False
    target = MessageTarget(address="notify.family", subject="s", body="b")

    result = await dispatcher.async_dispatch(Command.MESSAGE, 0, target, make_snapshot())

    assert not result.succeeded
    assert result.entry == "Message: failed, notification not sent"


@pytest.mark.asyncio
async def test_device_error_becomes_failed_result(dispatcher, mock_client):
    mock_client.async_start_charging.side_effect = RuntimeError("connection reset")

    result = await dispatcher.async_dispatch(Command.CHARGE_ON, 0, None, make_snapshot())

    assert not result.succeeded
    assert result.outcome.explanation == "connection reset"
    assert result.entry == "Charge On: failed, connection reset"
    assert result.reportable


@pytest.mark.asyncio
async def test_notifier_error_keeps_unplugged_unreported(dispatcher, mock_notifier):
    mock_notifier.async_send.side_effect = RuntimeError("notify down")

    result = await dispatcher.async_dispatch(
        Command.UNPLUGGED, 0, None, make_snapshot(charging_state="disconnected")
    )

    assert not result.succeeded
    assert not result.reportable
