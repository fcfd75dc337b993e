import itertools

import pytest
from rest_framework.test import APIClient

from apps.family.models import ROLE_MEMBER, ROLE_REPRESENTATIVE, FamilyMember


@pytest.fixture
def make_user(django_user_model):
    counter = itertools.count(1)

    def _make(username=None):
        username = username or f'user{next(counter)}'
        return django_user_model.objects.create_user(
            username=username,
            email=f'{username}@example.com',
            password='family-pass-123',
            first_name=username.title(),
        )

    return _make


@pytest.fixture
def creator(make_user):
    return make_user('creator')


@pytest.fixture
def add_member(creator):
    """Link a user to the creator's family directly, without an invitation."""
    def _add(user, role=ROLE_MEMBER, relationship='child', relationship_label='Child', family_creator=None):
        return FamilyMember.objects.create(
            creator=family_creator or creator,
            member=user,
            relationship=relationship,
            relationship_label=relationship_label,
            role=role,
        )

    return _add


@pytest.fixture
def representative(make_user, add_member):
    user = make_user('rep')
    add_member(user, role=ROLE_REPRESENTATIVE, relationship='spouse', relationship_label='Spouse')
    return user


@pytest.fixture
def member(make_user, add_member):
    user = make_user('member')
    add_member(user)
    return user


@pytest.fixture
def api_client():
    return APIClient()
