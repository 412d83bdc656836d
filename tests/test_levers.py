import pytest

from plantsim.levers import (
    COAL_FEED,
    LEVER_IDS,
    LeverBank,
    LeverChannel,
    default_channels,
    normalise_lever_values,
    uniform_levers,
)


def test_twelve_channels_at_rest():
    channels = default_channels()
    assert [channel.lever_id for channel in channels] == list(LEVER_IDS)
    assert len(LEVER_IDS) == 12
    assert all(channel.current_value == 0.0 and channel.target_value == 0.0 for channel in channels)
    assert all(channel.response_time > 0 for channel in channels)


class TestLeverChannel:
    def _channel(self):
        return LeverChannel("x", "X", "", response_time=10.0, sensitivity=0.5)

    def test_targets_are_clamped(self):
        channel = self._channel()
        assert channel.set_target(150.0) == 100.0
        assert channel.set_target(-20.0) == 0.0

    def test_non_finite_maps_to_minimum(self):
        channel = self._channel()
        assert channel.set_target(float("nan")) == 0.0
        assert channel.set_target(float("inf")) == 0.0

    def test_advance_lags_target(self):
        channel = self._channel()
        channel.set_target(100.0)
        moved = channel.advance(1.0)
        assert 0.0 < moved < 100.0

    def test_advance_settles_exactly(self):
        channel = self._channel()
        channel.set_target(80.0)
        for _ in range(500):
            channel.advance(1.0)
        assert channel.current_value == 80.0


class TestLeverBank:
    def test_set_target_and_advance(self):
        bank = LeverBank()
        bank.set_target(COAL_FEED, 60.0)
        values = bank.advance(0.5)
        assert 0.0 < values[COAL_FEED] < 60.0
        assert bank.targets()[COAL_FEED] == 60.0

    def test_set_immediate_skips_lag(self):
        bank = LeverBank()
        assert bank.set_immediate(COAL_FEED, 70.0) == 70.0
        assert bank.values()[COAL_FEED] == 70.0

    def test_unknown_lever_rejected(self):
        with pytest.raises(ValueError):
            LeverBank().set_target("turbo_boost", 10.0)

    def test_reset_restores_rest_position(self):
        bank = LeverBank()
        bank.set_immediate(COAL_FEED, 70.0)
        bank.reset()
        assert bank.values()[COAL_FEED] == 0.0

    def test_snapshot_is_detached(self):
        bank = LeverBank()
        snapshot = bank.snapshot()
        snapshot[0].current_value = 99.0
        assert bank.values()[snapshot[0].lever_id] == 0.0


class TestNormaliseLeverValues:
    def test_clamps_range_and_non_finite(self):
        levers = uniform_levers(50.0, coal_feed=150.0, air_supply=-10.0, feedwater=float("nan"))
        values = normalise_lever_values(levers)
        assert values["coal_feed"] == 100.0
        assert values["air_supply"] == 0.0
        assert values["feedwater"] == 0.0

    def test_missing_lever_raises(self):
        levers = uniform_levers()
        del levers["condenser"]
        with pytest.raises(ValueError, match="condenser"):
            normalise_lever_values(levers)

    def test_unknown_lever_raises(self):
        levers = uniform_levers()
        levers["afterburner"] = 10.0
        with pytest.raises(ValueError, match="afterburner"):
            normalise_lever_values(levers)


def test_uniform_levers_rejects_unknown_override():
    with pytest.raises(ValueError):
        uniform_levers(50.0, warp_drive=10.0)


class TestConfiguredResponseTimes:
    def test_channels_read_response_from_config(self, cfg):
        channels = {channel.lever_id: channel for channel in default_channels(cfg)}
        for lever_id in LEVER_IDS:
            assert channels[lever_id].response_time == cfg.LEVER_RESPONSE_S[lever_id]

    def test_override_changes_lever_lag(self, cfg):
        slow = LeverBank(cfg.with_overrides(LEVER_RESPONSE_S={COAL_FEED: 1000.0}))
        fast = LeverBank(cfg.with_overrides(LEVER_RESPONSE_S={COAL_FEED: 0.1}))
        for bank in (slow, fast):
            bank.set_target(COAL_FEED, 100.0)
        slow_value = slow.advance(1.0)[COAL_FEED]
        fast_value = fast.advance(1.0)[COAL_FEED]
        assert slow_value < 1.0
        assert fast_value == 100.0

    def test_unlisted_lever_uses_default_response(self, cfg):
        custom = cfg.with_overrides(LEVER_RESPONSE_S={}, DEFAULT_LEVER_RESPONSE_S=3.0)
        assert all(channel.response_time == 3.0 for channel in default_channels(custom))

    def test_override_does_not_leak_into_default(self, cfg):
        cfg.with_overrides(LEVER_RESPONSE_S={COAL_FEED: 1.0})
        assert cfg.LEVER_RESPONSE_S[COAL_FEED] == 15.0
