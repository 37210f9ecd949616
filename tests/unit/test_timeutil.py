"""Epoch helper tests."""

from datetime import datetime, timezone

from nextboard.timeutil import datetime_to_epoch, epoch_to_datetime


def test_epoch_round_trip():
    assert epoch_to_datetime(1_700_000_000) == datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)
    assert datetime_to_epoch(epoch_to_datetime(1_700_000_000)) == 1_700_000_000


def test_string_epochs_accepted():
    assert epoch_to_datetime("86400") == datetime(1970, 1, 2, tzinfo=timezone.utc)


def test_null_passes_through():
    assert epoch_to_datetime(None) is None
    assert epoch_to_datetime("") is None


def test_naive_datetimes_are_utc():
    assert datetime_to_epoch(datetime(1970, 1, 1, 0, 1)) == 60
