from __future__ import annotations

import logging

import pytest

from src.clock_terminal.clock_terminal.core.constants import STAFF_SNAPSHOT_KEY
from src.clock_terminal.clock_terminal.core.exceptions import AuthenticationError, ValidationError
from src.clock_terminal.clock_terminal.staff.cache import CredentialCache
from src.clock_terminal.clock_terminal.staff.service import CredentialService
from src.clock_terminal.clock_terminal.storage.local_store import LocalStore
from tests.fakes import InlineExecutor, InMemoryStaffDirectory, demo_staff


def _service(tmp_path, *, executor=None):
    store = LocalStore(tmp_path / "terminal.db")
    directory = InMemoryStaffDirectory(demo_staff())
    cache = CredentialCache(store, pin_hash_method="pbkdf2:sha256:1000")
    return CredentialService(directory, cache, executor=executor), directory, cache, store


def test_online_exact_match(tmp_path):
    svc, _, _, _ = _service(tmp_path)

    staff = svc.authenticate("K-007", "0007", online=True)

    assert staff.employee_id == "K-007"
    assert staff.name == "Kamau Njoroge"


def test_staff_id_is_case_insensitive(tmp_path):
    svc, _, _, _ = _service(tmp_path)

    assert svc.authenticate("  k-007 ", "0007", online=True).employee_id == "K-007"


def test_wrong_pin_online_is_rejected_with_generic_message(tmp_path):
    svc, _, _, _ = _service(tmp_path)

    with pytest.raises(AuthenticationError, match="Invalid ID or PIN"):
        svc.authenticate("K-007", "9999", online=True)


def test_remote_reject_is_final_even_when_cache_matches(tmp_path):
    svc, directory, _, _ = _service(tmp_path)
    svc.refresh_cache()
    del directory.staff["K-007"]

    with pytest.raises(AuthenticationError):
        svc.authenticate("K-007", "0007", online=True)


def test_blank_input_is_validation_error(tmp_path):
    svc, _, _, _ = _service(tmp_path)

    with pytest.raises(ValidationError):
        svc.authenticate("", "0007", online=True)
    with pytest.raises(ValidationError):
        svc.authenticate("K-007", "   ", online=True)


def test_successful_online_login_refreshes_cache_in_background(tmp_path):
    executor = InlineExecutor()
    svc, _, cache, _ = _service(tmp_path, executor=executor)

    svc.authenticate("K-007", "0007", online=True)

    assert executor.submitted == 1
    assert cache.size() == 2
    assert cache.refreshed_at is not None


def test_offline_login_uses_cached_roster(tmp_path):
    svc, _, _, _ = _service(tmp_path)
    svc.refresh_cache()

    staff = svc.authenticate("a-001", "1111", online=False)

    assert staff.employee_id == "A-001"
    assert staff.home_shop == "Stage"


def test_remote_error_falls_back_to_cache(tmp_path):
    svc, directory, _, _ = _service(tmp_path)
    svc.refresh_cache()
    directory.fail = True

    assert svc.authenticate("K-007", "0007", online=True).name == "Kamau Njoroge"


def test_offline_with_empty_cache_logs_cause(tmp_path, caplog):
    svc, _, _, _ = _service(tmp_path)

    with caplog.at_level(logging.WARNING), pytest.raises(AuthenticationError, match="Invalid ID or PIN"):
        svc.authenticate("K-007", "0007", online=False)

    assert "staff cache is empty" in caplog.text


def test_offline_unknown_staff_and_wrong_pin_log_different_causes(tmp_path, caplog):
    svc, _, _, _ = _service(tmp_path)
    svc.refresh_cache()

    with caplog.at_level(logging.INFO):
        with pytest.raises(AuthenticationError):
            svc.authenticate("Z-999", "0007", online=False)
        with pytest.raises(AuthenticationError):
            svc.authenticate("K-007", "1234", online=False)

    assert "not in cached roster" in caplog.text
    assert "wrong credentials (cache)" in caplog.text


def test_cache_stores_pin_hashes_only(tmp_path):
    svc, _, cache, store = _service(tmp_path)
    svc.refresh_cache()

    entry = store.get_json(STAFF_SNAPSHOT_KEY)["staff"]["K-007"]
    assert cache.snapshot()["staff"]["K-007"] == entry

    assert entry["pin_hash"] != "0007"
    assert "pin" not in entry


def test_refresh_replaces_whole_snapshot(tmp_path):
    svc, directory, cache, _ = _service(tmp_path)
    svc.refresh_cache()
    del directory.staff["A-001"]

    assert svc.refresh_cache() == 1
    assert not cache.contains("A-001")
    assert cache.contains("k-007")


def test_background_refresh_failure_is_logged_not_raised(tmp_path, caplog):
    executor = InlineExecutor()
    svc, directory, cache, _ = _service(tmp_path, executor=executor)
    directory.fail = True

    with caplog.at_level(logging.WARNING):
        future = svc.refresh_in_background()

    assert future is not None
    assert cache.is_empty()
    assert "Background staff cache refresh failed" in caplog.text


def test_offline_pin_must_match_exactly(tmp_path):
    svc, _, _, _ = _service(tmp_path)
    svc.refresh_cache()

    for pin in ("000", "00071", " 0007 ", "0007 "):
        with pytest.raises(AuthenticationError):
            svc.authenticate("K-007", pin, online=False)

    assert svc.authenticate("K-007", "0007", online=False).employee_id == "K-007"


def test_online_padded_pin_is_rejected(tmp_path):
    svc, _, _, _ = _service(tmp_path)

    with pytest.raises(AuthenticationError):
        svc.authenticate("K-007", " 0007 ", online=True)
