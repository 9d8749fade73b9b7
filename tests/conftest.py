import itertools

import pytest
from rest_framework.test import APIClient

from accounts.models import Category, Organization, User
from swaps import ledger, store


@pytest.fixture
def design(db):
    return Category.objects.create(name='Design')


@pytest.fixture
def writing(db):
    return Category.objects.create(name='Writing')


@pytest.fixture
def music(db):
    return Category.objects.create(name='Music')


@pytest.fixture
def make_user(db):
    counter = itertools.count()

    def _make(username=None, categories=(), skills=(), city='', **extra):
        username = username or f'user{next(counter)}'
        user = User.objects.create_user(
            username=username, email=f'{username}@example.com', password='s3cret-pass',
            skills=list(skills), city=city, **extra)
        user.categories.set(categories)
        return user
    return _make


@pytest.fixture
def alice(make_user, design):
    return make_user('alice', categories=[design], city='Colombo')


@pytest.fixture
def bob(make_user, design, writing):
    return make_user('bob', categories=[design, writing], skills=['Copywriting'])


@pytest.fixture
def carol(make_user):
    return make_user('carol')


@pytest.fixture
def acme(db):
    return Organization.objects.create(name='Acme')


@pytest.fixture
def make_swap(db):
    def _make(owner, categories=(), **fields):
        data = {'service_title': 'Logo design', 'service_required': 'Copywriting'}
        data.update(fields)
        data['service_categories'] = [c.pk for c in categories]
        return store.create(owner.pk, data)
    return _make


@pytest.fixture
def swap(make_swap, alice, design):
    return make_swap(alice, categories=[design])


@pytest.fixture
def in_progress_swap(swap, alice, bob):
    interaction = ledger.place_request(swap.pk, bob.pk)
    ledger.approve(interaction.pk, alice.pk)
    swap.refresh_from_db()
    return swap


@pytest.fixture
def api_client():
    return APIClient()
