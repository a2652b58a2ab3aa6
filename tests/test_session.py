"""Tests for the HTMLValidation session."""

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pytest
from pydantic import ValidationError

from html_validation.errors import StoreIOError
from html_validation.models.config import DEFAULT_TIDY_FLAGS, ValidationConfig, ValidationOptions
from html_validation.paths import ROOT_ENV_VAR
from html_validation.session import HTMLValidation

from conftest import FakeChecker, InterruptedPromoteStore

W1 = "line 1 column 1 - Warning: W1"


class TestSessionSetup:
    """Tests for session construction."""

    def test_creates_data_folder(self, tmp_path: Path, checker: FakeChecker):
        """Test the data folder is created with its parents."""
        folder = tmp_path / "deep" / "nested"
        session = HTMLValidation(folder, checker=checker)
        assert folder.is_dir()
        assert session.data_folder == folder

    def test_default_data_folder_uses_project_root(self, tmp_path: Path, checker, monkeypatch):
        """Test HTML_VALIDATION_ROOT sets the default data folder."""
        monkeypatch.setenv(ROOT_ENV_VAR, str(tmp_path))
        session = HTMLValidation(checker=checker)
        assert session.data_folder == tmp_path / ".validation"

    def test_options_mapping_is_validated(self, data_folder, checker):
        """Test a plain mapping is turned into ValidationOptions."""
        session = HTMLValidation(data_folder, {"ignore_proprietary": True}, checker=checker)
        assert session.options.ignore_proprietary is True
        assert session.options.tidy_flags == DEFAULT_TIDY_FLAGS

    def test_unknown_option_rejected(self, data_folder, checker):
        """Test unknown option keys fail session construction."""
        with pytest.raises(ValidationError):
            HTMLValidation(data_folder, {"tidyopts": "-qi"}, checker=checker)

    def test_from_config(self, data_folder, checker):
        """Test a session built from ValidationConfig."""
        cfg = ValidationConfig(data_folder=str(data_folder), options=ValidationOptions(tidy_flags=["-q"]))
        session = HTMLValidation.from_config(cfg, checker=checker)
        assert session.data_folder == data_folder
        assert session.options.tidy_flags == ("-q",)


class TestValidation:
    """Tests for HTMLValidation.validation()."""

    def test_result_files_named_by_identity(self, session: HTMLValidation, data_folder: Path):
        """Test result files use the sanitized resource identity."""
        result = session.validation("<bad>", "http://www.example.com/index.html")
        assert result.identity == "example.com_index.html"
        assert result.resource_name == "http://www.example.com/index.html"
        assert (data_folder / "example.com_index.html.newexceptions.txt").read_text() == W1

    def test_session_flags_reach_checker(self, session: HTMLValidation, checker: FakeChecker):
        """Test the session's tidy flags are passed to the checker."""
        session.validation("<ok>", "page")
        assert checker.calls[0][1] == DEFAULT_TIDY_FLAGS

    def test_accept_then_validate_again(self, session: HTMLValidation):
        """Test accepted diagnostics pass on the next validation."""
        session.validation("<bad>", "/page").accept()
        assert session.validation("<bad>", "/page").is_valid()

    def test_identity_collision_logged(self, session: HTMLValidation, caplog):
        """Test two names sharing result files log a warning."""
        with caplog.at_level(logging.WARNING, logger="html_validation.session"):
            session.validation("<ok>", "http://example.com/a?b")
            session.validation("<ok>", "/example.com/a/b")
        assert "share result files" in caplog.text

    def test_same_resource_twice_not_a_collision(self, session: HTMLValidation, caplog):
        """Test revalidating one resource logs nothing."""
        with caplog.at_level(logging.WARNING, logger="html_validation.session"):
            session.validation("<ok>", "/a")
            session.validation("<ok>", "/a")
        assert caplog.text == ""


class TestEachException:
    """Tests for the bulk review iterator."""

    def test_yields_only_pending_resources(self, session: HTMLValidation, checker: FakeChecker):
        """Test review skips clean and accepted resources and never runs the checker."""
        session.validation("<bad>", "/dirty")
        session.validation("<ok>", "/clean")
        session.validation("<bad>", "/accepted").accept()

        calls_before = len(checker.calls)
        identities = [r.identity for r in session.each_exception()]
        assert identities == ["dirty"]
        assert len(checker.calls) == calls_before

    def test_review_and_accept(self, session: HTMLValidation):
        """Test accepting every review result clears all pending files."""
        session.validation("<bad>", "/one")
        session.validation("<worse>", "/two")
        for result in session.each_exception():
            result.accept()
        assert list(session.each_exception()) == []
        assert session.validation("<bad>", "/one").is_valid()
        assert session.validation("<worse>", "/two").is_valid()

    def test_baseline_alone_is_not_pending(self, session: HTMLValidation, data_folder: Path):
        """Test a resource with only a baseline is not reviewed."""
        (data_folder / "x.exceptions.txt").write_text(W1)
        assert list(session.each_exception()) == []

    def test_review_is_restartable(self, session: HTMLValidation):
        """Test each call to each_exception starts over."""
        session.validation("<bad>", "/one")
        assert len(list(session.each_exception())) == 1
        assert len(list(session.each_exception())) == 1


class TestFlagSnapshot:
    """Tests that sessions do not see later changes to default flags."""

    def test_options_are_frozen(self, session: HTMLValidation):
        """Test session options cannot be changed in place."""
        with pytest.raises(ValidationError):
            session.options.tidy_flags = ("-q",)

    def test_sessions_capture_their_own_options(self, data_folder, checker):
        """Test each session keeps the options it was created with."""
        first = HTMLValidation(data_folder, ValidationOptions(tidy_flags=["-a"]), checker=checker)
        second = HTMLValidation(data_folder, checker=checker)
        assert first.options.tidy_flags == ("-a",)
        assert second.options.tidy_flags == DEFAULT_TIDY_FLAGS


class TestInterruptedAccept:
    """Tests for recovering when accept() stops between its two writes."""

    def test_review_finishes_interrupted_accept(self, data_folder: Path, checker: FakeChecker):
        """Test a resource left pending by a failed clear is offered and cleared by review."""
        store = InterruptedPromoteStore(data_folder)
        session = HTMLValidation(data_folder, checker=checker, store=store)
        result = session.validation("<bad>", "/page")
        with pytest.raises(StoreIOError):
            result.accept()
        assert store.load_baseline("page") == [W1]
        assert list(store.enumerate_pending_identities()) == ["page"]

        pending = list(session.each_exception())
        assert [r.identity for r in pending] == ["page"]
        assert pending[0].diagnostics == ()

        pending[0].accept()
        assert list(store.enumerate_pending_identities()) == []
        assert list(session.each_exception()) == []
        assert store.load_baseline("page") == [W1]

    def test_retrying_accept_on_same_result(self, data_folder: Path, checker: FakeChecker):
        """Test accept() can be called again on the result whose accept failed."""
        store = InterruptedPromoteStore(data_folder)
        session = HTMLValidation(data_folder, checker=checker, store=store)
        result = session.validation("<bad>", "/page")
        with pytest.raises(StoreIOError):
            result.accept()
        result.accept()
        assert result.is_valid()
        assert store.load_baseline("page") == [W1]
        assert store.load_pending("page") == []


class TestConcurrentWorkers:
    """Tests for parallel validations of distinct resources sharing one folder."""

    def test_parallel_validate_and_accept(self, data_folder: Path):
        """Test many threads validating and accepting different resources leave consistent files."""
        checker = FakeChecker(default=[W1, "line 9 column 1 - Error: E9"])
        session = HTMLValidation(data_folder, checker=checker)
        names = [f"/section/page{i}" for i in range(40)]

        def work(index: int) -> str:
            result = session.validation("<html>", names[index])
            if index % 2 == 0:
                result.accept()
            return result.identity

        with ThreadPoolExecutor(max_workers=8) as pool:
            identities = list(pool.map(work, range(len(names))))

        store = session.store
        assert len(set(identities)) == len(names)
        for index, identity in enumerate(identities):
            if index % 2 == 0:
                assert store.load_baseline(identity) == [W1, "line 9 column 1 - Error: E9"]
                assert store.load_pending(identity) == []
            else:
                assert not store.has_baseline(identity)
                assert store.load_pending(identity) == [W1, "line 9 column 1 - Error: E9"]

        assert set(store.enumerate_pending_identities()) == set(identities[1::2])
        assert all(path.name.endswith(".txt") for path in data_folder.iterdir())
