import pytest

from sitegate.models.Contacts import Contact, ContactStatus
from sitegate.models.Services import Service
from sitegate.repository.Contacts_repository import ContactRepo
from sitegate.repository.Services_repository import ServiceRepo
from sitegate.repository.Site_settings_repository import SiteSettingsRepo


@pytest.fixture
def settings_repo(db):
    return SiteSettingsRepo(session=db.session)


@pytest.fixture
def service_repo(db):
    return ServiceRepo(session=db.session)


@pytest.fixture
def contact_repo(db):
    return ContactRepo(session=db.session)


def test_set_many_inserts_and_updates(settings_repo):
    settings_repo.set_many({"title": "One", "theme": "dark"})
    settings_repo.set_many({"title": "Two"})

    values = settings_repo.as_dict()
    assert values["title"] == "Two"
    assert values["theme"] == "dark"


def test_json_values_round_trip(settings_repo):
    settings_repo.set_many({"audio": {"url": "/uploads/a.mp3", "autoplay": True}})
    assert settings_repo.as_dict()["audio"] == {"url": "/uploads/a.mp3", "autoplay": True}


def test_services_ordered_and_updated(service_repo):
    before = len(service_repo.ordered())
    service = service_repo.add(Service(name="Hosting", features=["SSL"]))

    updated = service_repo.update_fields(service.id, {"price": "$5"})
    assert updated.price == "$5"
    assert service_repo.ordered()[-1].name == "Hosting"
    assert len(service_repo.ordered()) == before + 1
    assert service_repo.update_fields(99999, {"price": "$1"}) is None


def test_contact_status(contact_repo):
    contact = contact_repo.add(Contact(name="Ana", email="ana@example.com", message="hi"))
    assert contact.status == ContactStatus.NEW

    contact_repo.set_status(contact.id, ContactStatus.ARCHIVED)
    assert contact_repo.get(contact.id).status == ContactStatus.ARCHIVED
    assert contact_repo.set_status(99999, ContactStatus.READ) is None
