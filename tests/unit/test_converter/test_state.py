"""Tests for the converter state snapshot."""
import dataclasses

import pytest

from fxconverter.converter.state import ConversionState, Phase


def test_state_is_immutable():
    state = ConversionState(from_currency_code="PLN", to_currency_code="UAH")
    with pytest.raises(dataclasses.FrozenInstanceError):
        state.loading = True


def test_phase():
    state = ConversionState(from_currency_code="PLN", to_currency_code="UAH")
    assert state.phase is Phase.IDLE
    assert dataclasses.replace(state, loading=True).phase is Phase.CONVERTING
    assert dataclasses.replace(state, error="nope").phase is Phase.ERROR
    assert dataclasses.replace(state, error="nope", loading=True).phase is Phase.CONVERTING


def test_network_degraded_overlay():
    state = ConversionState(from_currency_code="PLN", to_currency_code="UAH")
    assert state.network_degraded is False
    degraded = dataclasses.replace(state, network_available=False)
    assert degraded.network_degraded is True
    assert degraded.phase is Phase.IDLE
