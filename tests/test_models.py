import pytest
from pydantic import ValidationError

from phraseapp_client.models import (
    Executor,
    Link,
    LinkSet,
    Page,
    Progress,
    ProgressEnvelope,
)


def test_link_set_defaults_are_empty():
    links = LinkSet()

    assert links.first is links.prev is links.next is links.last is None
    assert not links.has_next
    assert links.estimated_total is None


def test_estimated_total_is_last_page_times_per_page():
    links = LinkSet(
        last=Link(url="https://a.test/k?page=4&per_page=50", rel="last", page=4, per_page=50)
    )

    assert links.estimated_total == 200


@pytest.mark.parametrize(
    "last",
    [
        Link(url="https://a.test/k?page=4", rel="last", page=4),
        Link(url="https://a.test/k?per_page=50", rel="last", per_page=50),
    ],
)
def test_estimated_total_needs_both_fields(last):
    assert LinkSet(last=last).estimated_total is None


def test_link_rejects_non_positive_page_numbers():
    with pytest.raises(ValidationError):
        Link(url="https://a.test/k", rel="next", page=0)


def test_link_set_is_immutable():
    links = LinkSet()

    with pytest.raises(ValidationError):
        links.next = Link(url="https://a.test/k", rel="next")


def test_page_defaults():
    page = Page()

    assert page.records == []
    assert page.links == LinkSet()


def test_progress_envelope():
    envelope = ProgressEnvelope(data={"id": "k1"}, progress=Progress(current=1))

    assert envelope.data == {"id": "k1"}
    assert envelope.progress.current == 1
    assert envelope.progress.total is None


def test_progress_current_starts_at_one():
    with pytest.raises(ValidationError):
        Progress(current=0, total=10)


def test_executor_protocol_is_runtime_checkable(fake_executor_cls):
    assert isinstance(fake_executor_cls({}), Executor)
    assert not isinstance(object(), Executor)
