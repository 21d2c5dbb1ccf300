# src/court_radar/tests/test_storage.py
"""
Unit tests for the saved prospect pipeline store.
"""
import pytest

from court_radar.models import CommercialCourt, PipelineStatus, ResidentialProspect
from court_radar.repository import InMemoryDataSource, NotFoundError
from court_radar.storage import SavedProspectStore, create_db_engine


@pytest.fixture
def store():
    store = SavedProspectStore("sqlite://")
    yield store
    store.close()


@pytest.fixture
def source():
    return InMemoryDataSource()


class TestSave:
    """Tests for saving prospects."""

    @pytest.mark.unit
    def test_save_starts_new_with_empty_notes(self, store, source):
        saved = store.save(source.get_prospect("501"))

        assert saved.id == "501"
        assert saved.pipeline_status == PipelineStatus.NEW
        assert saved.notes == ""
        assert isinstance(saved.prospect, ResidentialProspect)

    @pytest.mark.unit
    def test_save_round_trips_prospect(self, store, source):
        court = source.get_prospect("2")
        saved = store.save(court)

        assert isinstance(saved.prospect, CommercialCourt)
        assert saved.prospect == court

    @pytest.mark.unit
    def test_save_is_idempotent(self, store, source):
        prospect = source.get_prospect("501")
        store.save(prospect)
        store.update("501", status=PipelineStatus.EMAIL_SENT, notes="Called")

        again = store.save(prospect)

        assert again.pipeline_status == PipelineStatus.EMAIL_SENT
        assert again.notes == "Called"
        assert len(store.list()) == 1


class TestQueries:
    """Tests for listing and reading."""

    @pytest.mark.unit
    def test_list_all(self, store, source):
        for prospect_id in ("501", "101", "1"):
            store.save(source.get_prospect(prospect_id))

        assert {s.id for s in store.list()} == {"501", "101", "1"}

    @pytest.mark.unit
    def test_list_by_status(self, store, source):
        store.save(source.get_prospect("501"))
        store.save(source.get_prospect("502"))
        store.update("502", status="Quote Sent")

        quoted = store.list(PipelineStatus.QUOTE_SENT)
        assert [s.id for s in quoted] == ["502"]

    @pytest.mark.unit
    def test_get_unknown_raises(self, store):
        with pytest.raises(NotFoundError):
            store.get("501")


class TestUpdateAndRemove:
    """Tests for pipeline changes."""

    @pytest.mark.unit
    def test_update_status_and_notes(self, store, source):
        store.save(source.get_prospect("501"))

        updated = store.update("501", status=PipelineStatus.EMAIL_SENT, notes="Sent intro")

        assert updated.pipeline_status == PipelineStatus.EMAIL_SENT
        assert updated.notes == "Sent intro"
        assert store.get("501").notes == "Sent intro"
        assert updated.updated_at >= updated.saved_at

    @pytest.mark.unit
    def test_partial_update_keeps_other_field(self, store, source):
        store.save(source.get_prospect("501"))
        store.update("501", notes="first")

        updated = store.update("501", status=PipelineStatus.QUOTE_SENT)

        assert updated.notes == "first"

    @pytest.mark.unit
    def test_unknown_status_rejected(self, store, source):
        store.save(source.get_prospect("501"))
        with pytest.raises(ValueError):
            store.update("501", status="Won")

    @pytest.mark.unit
    def test_update_unknown_raises(self, store):
        with pytest.raises(NotFoundError):
            store.update("501", notes="x")

    @pytest.mark.unit
    def test_remove(self, store, source):
        store.save(source.get_prospect("501"))
        store.remove("501")

        assert store.list() == []
        with pytest.raises(NotFoundError):
            store.remove("501")


class TestEngine:
    """Tests for engine creation."""

    @pytest.mark.unit
    def test_file_database_persists(self, tmp_path, source):
        url = f"sqlite:///{tmp_path / 'radar.db'}"
        first = SavedProspectStore(url)
        first.save(source.get_prospect("501"))
        first.close()

        second = SavedProspectStore(url)
        assert [s.id for s in second.list()] == ["501"]
        second.close()

    @pytest.mark.unit
    def test_shared_engine(self, source):
        engine = create_db_engine("sqlite:///:memory:")
        SavedProspectStore(engine=engine).save(source.get_prospect("1"))

        assert [s.id for s in SavedProspectStore(engine=engine).list()] == ["1"]
        engine.dispose()
