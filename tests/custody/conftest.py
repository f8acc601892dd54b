import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def custody_bed():
    from custody.domain import custody

    bed = DomainFixture(custody)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(custody_bed):
    with custody_bed.domain_context():
        yield


@pytest.fixture()
def audit_sink(monkeypatch):
    """A fresh in-memory audit sink installed as the configured sink."""
    from custody.audit import get_audit_sink, reset_audit_sink

    monkeypatch.setenv("AUDIT_SINK", "memory")
    reset_audit_sink()
    sink = get_audit_sink()
    yield sink
    reset_audit_sink()
