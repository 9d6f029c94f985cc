from __future__ import annotations

from datetime import date

import pytest

from catalog.repositories.author import AuthorRepository
from catalog.repositories.base import Pagination, parse_sort_tokens
from tests.factories.author import AuthorFactory
from tests.factories.book import BookFactory


@pytest.fixture()
def repo(session) -> AuthorRepository:
    return AuthorRepository(session=session)


def test_parse_sort_tokens():
    assert parse_sort_tokens(["-created_at", "title", "-", ""]) == [
        ("created_at", True),
        ("title", False),
    ]


def test_count_books(repo):
    author = AuthorFactory()
    BookFactory.create_batch(3, author=author)
    BookFactory()
    assert repo.count_books(author.id) == 3


def test_paginate_sorts_descending(repo):
    AuthorFactory(last_name="Adams")
    AuthorFactory(last_name="Zola")
    AuthorFactory(last_name="Mann")

    page = repo.paginate(Pagination(page=1, limit=2, sort=["-last_name"]))

    assert [a.last_name for a in page.items] == ["Zola", "Mann"]
    assert page.total == 3


def test_country_filter(repo):
    AuthorFactory(country="FR")
    AuthorFactory(country="DE")
    assert [a.country for a in repo.list(filters={"country": "FR"})] == ["FR"]


def test_assign_updates_runs_validators(repo):
    author = AuthorFactory()
    with pytest.raises(ValueError):
        repo.assign_updates(author, {"date_of_birth": date.today()})
